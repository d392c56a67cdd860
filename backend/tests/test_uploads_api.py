"""Tests for presigned resource file uploads."""

from urllib.parse import quote

import pytest
from botocore.exceptions import ClientError
from httpx import AsyncClient

from app.api.deps import get_uploader
from app.config import get_settings
from app.errors import ValidationError
from app.main import app
from app.services.uploads import UploadService, safe_file_name

BUCKET = "yeh-uploads"


class FakeS3:
    def __init__(self, fail: bool = False):
        self.posts: list[dict] = []
        self.gets: list[dict] = []
        self.fail = fail

    def generate_presigned_post(self, Bucket, Key, Fields=None, Conditions=None, ExpiresIn=3600):
        if self.fail:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GeneratePresignedPost")
        self.posts.append({"Bucket": Bucket, "Key": Key, "Fields": Fields, "Conditions": Conditions, "ExpiresIn": ExpiresIn})
        return {"url": f"https://{Bucket}.s3.amazonaws.com/", "fields": {"key": Key, **(Fields or {}), "policy": "p"}}

    def generate_presigned_url(self, ClientMethod, Params=None, ExpiresIn=3600):
        self.gets.append({"ClientMethod": ClientMethod, "Params": Params, "ExpiresIn": ExpiresIn})
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}?X-Amz-Expires={ExpiresIn}"


@pytest.fixture
def s3() -> FakeS3:
    fake = FakeS3()
    app.dependency_overrides[get_uploader] = lambda: UploadService(bucket=BUCKET, client=fake)
    return fake


def _upload(**overrides) -> dict:
    body = {"fileName": "Thought record.pdf", "fileType": "application/pdf"}
    body.update(overrides)
    return body


async def test_counsellor_gets_upload_and_file_urls(client: AsyncClient, drbob, s3):
    response = await client.post("/api/upload", json=_upload(), headers=drbob.headers)
    assert response.status_code == 200
    body = response.json()

    key = body["key"]
    assert key.startswith(f"resources/{drbob.id}/")
    assert key.endswith("-Thought-record.pdf")
    assert body["uploadUrl"] == f"https://{BUCKET}.s3.amazonaws.com/"
    assert body["fields"]["key"] == key
    assert body["fields"]["Content-Type"] == "application/pdf"
    assert body["downloadUrl"].startswith(f"https://{BUCKET}.s3.amazonaws.com/{key}")
    assert BUCKET in body["fileUrl"]
    assert body["fileUrl"].endswith(quote(key))
    assert body["message"] == "Upload URL generated successfully"

    settings = get_settings()
    (post,) = s3.posts
    assert post["Bucket"] == BUCKET
    assert post["ExpiresIn"] == settings.upload_url_expiry_seconds
    assert ["content-length-range", 1, settings.max_upload_size_bytes] in post["Conditions"]
    (get,) = s3.gets
    assert get["ClientMethod"] == "get_object"
    assert get["ExpiresIn"] == settings.download_url_expiry_seconds


async def test_file_url_is_accepted_by_resource_create(client: AsyncClient, drbob, s3):
    file_url = (await client.post("/api/upload", json=_upload(), headers=drbob.headers)).json()["fileUrl"]

    response = await client.post(
        "/api/resources",
        json={"title": "Thought record", "type": "worksheet", "fileUrl": file_url},
        headers=drbob.headers,
    )
    assert response.status_code == 201
    assert response.json()["fileUrl"] == file_url


async def test_admin_may_upload(client: AsyncClient, admin, s3):
    response = await client.post("/api/upload", json=_upload(), headers=admin.headers)
    assert response.status_code == 200
    assert response.json()["key"].startswith(f"resources/{admin.id}/")


async def test_students_cannot_upload(client: AsyncClient, alice, s3):
    response = await client.post("/api/upload", json=_upload(), headers=alice.headers)
    assert response.status_code == 403
    assert s3.posts == []


async def test_upload_requires_auth(client: AsyncClient, s3):
    response = await client.post("/api/upload", json=_upload())
    assert response.status_code == 401


@pytest.mark.parametrize(
    "body",
    [
        {"fileType": "application/pdf"},
        {"fileName": "notes.pdf"},
        {"fileName": "", "fileType": "application/pdf"},
        {"fileName": "notes.pdf", "fileType": "pdf"},
    ],
)
async def test_missing_or_malformed_fields_are_rejected(client: AsyncClient, drbob, s3, body):
    response = await client.post("/api/upload", json=body, headers=drbob.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
    assert s3.posts == []


async def test_path_components_are_stripped_from_the_key(client: AsyncClient, drbob, s3):
    response = await client.post(
        "/api/upload", json=_upload(fileName="../../etc/passwd"), headers=drbob.headers
    )
    assert response.status_code == 200
    key = response.json()["key"]
    assert key.startswith(f"resources/{drbob.id}/")
    assert key.endswith("-passwd")
    assert ".." not in key


async def test_unconfigured_bucket_is_unavailable(client: AsyncClient, drbob):
    fake = FakeS3()
    app.dependency_overrides[get_uploader] = lambda: UploadService(bucket="", client=fake)

    response = await client.post("/api/upload", json=_upload(), headers=drbob.headers)
    assert response.status_code == 503
    assert response.json() == {"message": "File uploads are not configured"}
    assert fake.posts == []


async def test_signing_failure_is_an_internal_error(client: AsyncClient, drbob, caplog):
    app.dependency_overrides[get_uploader] = lambda: UploadService(bucket=BUCKET, client=FakeS3(fail=True))

    response = await client.post("/api/upload", json=_upload(), headers=drbob.headers)
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to generate upload URL"}
    assert "Failed to presign upload" in caplog.text


@pytest.mark.parametrize("name", ["", "   ", "..", "a/.."])
def test_safe_file_name_needs_a_file(name):
    with pytest.raises(ValidationError):
        safe_file_name(name)


def test_safe_file_name_keeps_the_last_component():
    assert safe_file_name("C:\\Users\\cora\\My Worksheet.pdf") == "My-Worksheet.pdf"
    assert safe_file_name("plain.mp3") == "plain.mp3"
