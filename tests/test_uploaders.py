"""Tests for the local and S3 uploaders."""

import httpx
import pytest

from artifacthandoff.infrastructure.settings import Settings
from artifacthandoff.infrastructure.uploads import LocalFileUploader, sanitize_filename
from artifacthandoff.infrastructure.uploads.local_uploader import PUBLIC_URL_ENV_VARS
from artifacthandoff.infrastructure.uploads.s3_uploader import (
    S3ArtifactUploader,
    S3UploaderConfig,
    s3_uploader_from_settings,
)

from conftest import TENANT


@pytest.fixture
def no_public_url_env(monkeypatch):
    for name in PUBLIC_URL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_sanitize_filename():
    assert sanitize_filename("catálogo de junio.pdf") == "cat_logo_de_junio.pdf"
    assert sanitize_filename("../../etc/passwd") == ".._.._etc_passwd"
    assert sanitize_filename("") == "catalogo.pdf"


class TestLocalFileUploader:
    @pytest.mark.asyncio
    async def test_writes_file_and_returns_public_url(self, tmp_path, no_public_url_env):
        uploader = LocalFileUploader(tmp_path, public_base_url="https://api.example/")

        url = await uploader.upload(b"%PDF-1.7", "catalogo.pdf", "application/pdf", TENANT)

        assert url.startswith("https://api.example/uploads/catalogs/ws_acme-")
        assert url.endswith("-catalogo.pdf")
        name = url.rsplit("/", 1)[1]
        assert (tmp_path / "catalogs" / name).read_bytes() == b"%PDF-1.7"
        assert not list((tmp_path / "catalogs").glob(".*.part"))

    @pytest.mark.asyncio
    async def test_each_upload_gets_its_own_file(self, tmp_path, no_public_url_env):
        uploader = LocalFileUploader(tmp_path, public_base_url="https://api.example")

        first = await uploader.upload(b"a", "catalogo.pdf", "application/pdf", TENANT)
        second = await uploader.upload(b"b", "catalogo.pdf", "application/pdf", TENANT)

        assert first != second
        assert len(list((tmp_path / "catalogs").iterdir())) == 2

    @pytest.mark.asyncio
    async def test_base_url_from_environment(self, tmp_path, no_public_url_env, monkeypatch):
        monkeypatch.setenv("NGROK_URL", "https://abc.ngrok.app")
        uploader = LocalFileUploader(tmp_path)

        url = await uploader.upload(b"a", "c.pdf", "application/pdf", TENANT)

        assert url.startswith("https://abc.ngrok.app/uploads/catalogs/")

    @pytest.mark.asyncio
    async def test_no_base_url_fails_before_writing(self, tmp_path, no_public_url_env):
        uploader = LocalFileUploader(tmp_path)

        with pytest.raises(RuntimeError, match="No public base URL"):
            await uploader.upload(b"a", "c.pdf", "application/pdf", TENANT)
        assert not (tmp_path / "catalogs").exists()

    @pytest.mark.asyncio
    async def test_ngrok_probe_picks_https_tunnel(self, tmp_path, no_public_url_env):
        def handler(request):
            return httpx.Response(
                200,
                json={
                    "tunnels": [
                        {"public_url": "http://plain.ngrok.app"},
                        {"public_url": "https://secure.ngrok.app/"},
                    ]
                },
            )

        uploader = LocalFileUploader(tmp_path, probe_ngrok=True, transport=httpx.MockTransport(handler))

        url = await uploader.upload(b"a", "c.pdf", "application/pdf", TENANT)

        assert url.startswith("https://secure.ngrok.app/uploads/catalogs/")

    @pytest.mark.asyncio
    async def test_unreachable_ngrok_means_no_base_url(self, tmp_path, no_public_url_env):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        uploader = LocalFileUploader(tmp_path, probe_ngrok=True, transport=httpx.MockTransport(handler))

        with pytest.raises(RuntimeError):
            await uploader.upload(b"a", "c.pdf", "application/pdf", TENANT)


class RecordingS3Client:
    def __init__(self) -> None:
        self.puts: list[dict] = []
        self.presigned: list[dict] = []

    def put_object(self, **kwargs):
        self.puts.append(kwargs)
        return {"ETag": '"abc"'}

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        self.presigned.append({"operation": operation, "params": Params, "expires": ExpiresIn})
        return f"https://s3.example/{Params['Bucket']}/{Params['Key']}?X-Amz-Signature=sig"


def _config(**overrides) -> S3UploaderConfig:
    values = dict(
        endpoint="http://minio:9000",
        region="us-east-1",
        access_key="key",
        secret_key="secret",
        bucket="catalogs",
        prefix="catalogs",
        presign_seconds=900,
    )
    values.update(overrides)
    return S3UploaderConfig(**values)


class TestS3ArtifactUploader:
    @pytest.mark.asyncio
    async def test_put_then_presign(self):
        client = RecordingS3Client()
        uploader = S3ArtifactUploader(_config(), client=client)

        url = await uploader.upload(b"%PDF", "catalogo.pdf", "application/pdf", TENANT)

        assert len(client.puts) == 1
        put = client.puts[0]
        assert put["Bucket"] == "catalogs"
        assert put["Body"] == b"%PDF"
        assert put["ContentType"] == "application/pdf"
        assert put["Key"].startswith("catalogs/ws_acme/")
        assert put["Key"].endswith("-catalogo.pdf")

        assert client.presigned == [
            {"operation": "get_object", "params": {"Bucket": "catalogs", "Key": put["Key"]}, "expires": 900}
        ]
        assert url.startswith("https://s3.example/catalogs/catalogs/ws_acme/")

    @pytest.mark.asyncio
    async def test_public_base_url_skips_presign(self):
        client = RecordingS3Client()
        uploader = S3ArtifactUploader(_config(public_base_url="https://cdn.example/"), client=client)

        url = await uploader.upload(b"%PDF", "catalogo.pdf", "application/pdf", TENANT)

        assert client.presigned == []
        assert url == f"https://cdn.example/{client.puts[0]['Key']}"

    @pytest.mark.asyncio
    async def test_client_error_propagates(self):
        class BrokenClient(RecordingS3Client):
            def put_object(self, **kwargs):
                raise ConnectionError("endpoint unreachable")

        uploader = S3ArtifactUploader(_config(), client=BrokenClient())

        with pytest.raises(ConnectionError):
            await uploader.upload(b"%PDF", "catalogo.pdf", "application/pdf", TENANT)

    def test_object_keys_are_unique(self):
        uploader = S3ArtifactUploader(_config(), client=RecordingS3Client())

        keys = {uploader.object_key(TENANT, "catalogo.pdf") for _ in range(10)}

        assert len(keys) == 10


class TestS3UploaderFromSettings:
    def test_public_base_comes_from_s3_setting_not_api_base(self):
        settings = Settings(
            _env_file=None,
            uploader_backend="s3",
            public_base_url="https://api.example",
            s3_public_base_url="https://cdn.example",
        )

        uploader = s3_uploader_from_settings(settings)

        assert uploader.cfg.public_base_url == "https://cdn.example"

    @pytest.mark.asyncio
    async def test_api_base_alone_still_presigns(self):
        settings = Settings(_env_file=None, uploader_backend="s3", public_base_url="https://api.example")
        uploader = s3_uploader_from_settings(settings)
        client = RecordingS3Client()
        uploader.client = client

        url = await uploader.upload(b"%PDF", "catalogo.pdf", "application/pdf", TENANT)

        assert not url.startswith("https://api.example")
        assert len(client.presigned) == 1
        assert url.startswith(f"https://s3.example/catalogs/catalogs/{TENANT}/")

    @pytest.mark.asyncio
    async def test_public_url_shape(self):
        settings = Settings(_env_file=None, uploader_backend="s3", s3_public_base_url="https://cdn.example/")
        uploader = s3_uploader_from_settings(settings)
        uploader.client = RecordingS3Client()

        url = await uploader.upload(b"%PDF", "mi catálogo.pdf", "application/pdf", TENANT)

        assert url.startswith(f"https://cdn.example/catalogs/{TENANT}/")
        assert url.endswith("-mi_cat_logo.pdf")
