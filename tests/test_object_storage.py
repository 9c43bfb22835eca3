import pytest

from app.yardgate.core.error_catalog import StorageFaultError
from app.yardgate.services.object_storage import ObjectStorageService


def test_copy_keeps_the_source(storage, fake_s3):
    fake_s3.put("temp-files/a.jpeg", b"bytes")

    storage.copy_object("temp-files/a.jpeg", "submissions/movements/m/documents/a.jpeg")

    assert fake_s3.objects == {
        "temp-files/a.jpeg": b"bytes",
        "submissions/movements/m/documents/a.jpeg": b"bytes",
    }
    assert fake_s3.calls_for("copy_object")[0]["CopySource"] == {"Bucket": "yard-bucket", "Key": "temp-files/a.jpeg"}
    assert storage.public_url("submissions/movements/m/documents/a.jpeg") == (
        "https://yard-bucket.s3.us-east-1.amazonaws.com/submissions/movements/m/documents/a.jpeg"
    )


def test_delete_objects_reports_failures(storage, fake_s3):
    fake_s3.put("temp-files/a.jpeg")
    fake_s3.put("temp-files/b.jpeg")
    fake_s3.fail("delete_object", on_call=1)

    deleted, failed = storage.delete_objects(["temp-files/a.jpeg", "temp-files/b.jpeg"])

    assert (deleted, failed) == (["temp-files/b.jpeg"], ["temp-files/a.jpeg"])
    assert list(fake_s3.objects) == ["temp-files/a.jpeg"]


def test_missing_source_is_a_storage_fault(storage):
    with pytest.raises(StorageFaultError) as exc_info:
        storage.copy_object("temp-files/missing.jpeg", "submissions/x.jpeg")

    assert exc_info.value.details == {"operation": "copy", "key": "temp-files/missing.jpeg"}
    assert "does not exist" in exc_info.value.message


def test_public_base_url_takes_precedence(storage, monkeypatch):
    monkeypatch.setattr(storage, "_public_base_url", "https://cdn.example.com/")

    assert storage.public_url("submissions/a.jpeg") == "https://cdn.example.com/submissions/a.jpeg"


def test_endpoint_host_without_scheme_is_normalized(monkeypatch):
    service = ObjectStorageService()
    monkeypatch.setattr(service, "_endpoint", "nyc3.digitaloceanspaces.com")

    assert service._normalized_endpoint_url() == "https://nyc3.digitaloceanspaces.com"


def test_missing_bucket_is_reported(monkeypatch):
    service = ObjectStorageService()
    monkeypatch.setattr(service, "_bucket", "")
    monkeypatch.setattr(service, "_region", "us-east-1")

    with pytest.raises(StorageFaultError) as exc_info:
        service.delete_object("temp-files/a.jpeg")

    assert "S3_BUCKET" in exc_info.value.message
