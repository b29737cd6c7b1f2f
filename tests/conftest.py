"""Test configuration and fixtures for cloudconvert_webhooks.

This module provides:
- The example webhook delivery from the CloudConvert docs
- The signing secret and its matching signature
- Settings and a FastAPI test client wired to the webhook router
"""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cloudconvert_webhooks import Event, WebhookSettings, compute_signature
from cloudconvert_webhooks.routes import create_webhook_router

EXAMPLE_WEBHOOK = """{
  "event": "job.finished",
  "job": {
    "id": "4b6ee8e2-e293-4805-b48e-a03876d1ec66",
    "tag": "myjob-123",
    "status": null,
    "created_at": "2019-04-13T21:18:47+00:00",
    "started_at": null,
    "ended_at": null,
    "tasks": [
      {
        "id": "acdf8096-10a1-4ab7-b009-539f5f329cad",
        "name": "export-1",
        "operation": "export/url",
        "status": "finished",
        "message": null,
        "percent": 100,
        "result": {
          "files": [
            {
              "filename": "file.pdf",
              "url": "https://storage.cloudconvert.com/eed87242-577e-4e3e-8178-9edbe51975dd/file.pdf?temp_url_sig=79c2db4d884926bbcc5476d01b4922a19137aee9&temp_url_expires=1545962104"
            }
          ]
        },
        "created_at": "2019-04-13T21:18:47+00:00",
        "started_at": "2019-04-13T21:18:47+00:00",
        "ended_at": "2019-04-13T21:18:47+00:00",
        "depends_on_task_ids": [
        ],
        "links": {
          "self": "https://api.cloudconvert.com/v2/tasks/acdf8096-10a1-4ab7-b009-539f5f329cad"
        }
      }
    ],
    "links": {
      "self": "https://api.cloudconvert.com/v2/jobs/4b6ee8e2-e293-4805-b48e-a03876d1ec66"
    }
  }
}"""

SIGNING_SECRET = bytes([1, 2, 3, 9, 2])


@pytest.fixture
def payload() -> bytes:
    return EXAMPLE_WEBHOOK.encode("utf-8")


@pytest.fixture
def signing_secret() -> bytes:
    return SIGNING_SECRET


@pytest.fixture
def signature(payload: bytes, signing_secret: bytes) -> str:
    return compute_signature(payload, signing_secret)


@pytest.fixture
def event(payload: bytes, signature: str, signing_secret: bytes) -> Event:
    return Event.from_json(payload, signature, signing_secret)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> WebhookSettings:
    """Settings with a known text secret, isolated from the real environment."""
    for name in ("CLOUDCONVERT_SIGNATURE_HEADER", "CLOUDCONVERT_WEBHOOK_PATH"):
        monkeypatch.delenv(name, raising=False)
    return WebhookSettings(signing_secret="whsec-test-secret")  # pyright: ignore[reportArgumentType]


@pytest.fixture
def received_events() -> list[Event]:
    return []


@pytest.fixture
def client(settings: WebhookSettings, received_events: list[Event]) -> Iterator[TestClient]:
    app = FastAPI()
    app.include_router(create_webhook_router(received_events.append, settings=settings))

    with TestClient(app) as test_client:
        yield test_client
