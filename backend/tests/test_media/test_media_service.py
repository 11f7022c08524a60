"""
Tests for the media service: upload validation, file storage and deletion.
"""

import pytest

from garmentsync.domain.enums import MediaCategory
from garmentsync.services.media import (
    IncomingFile,
    MediaNotFoundError,
    MediaService,
    MediaValidationError,
)
from garmentsync.services.orders.service import OrderNotFoundError


@pytest.fixture
def media_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def service(storage, media_dir) -> MediaService:
    return MediaService(storage, media_dir=media_dir, max_upload_bytes=1024)


def _file(name: str = "Front View.JPG", content: bytes = b"\xff\xd8jpeg") -> IncomingFile:
    return IncomingFile(original_name=name, content_type="image/jpeg", content=content)


class TestUpload:
    async def test_upload_writes_file_and_records_metadata(
        self, service, make_order, media_dir
    ):
        await make_order("PO-1")

        [stored] = await service.upload(
            order_id="PO-1",
            category=MediaCategory.PRODUCT_PHOTOS,
            files=[_file()],
            uploaded_by="Sarah Chen",
            description="Approved sample",
        )

        assert stored.original_name == "Front View.JPG"
        assert stored.filename.endswith(".jpg")
        assert stored.url == f"/uploads/{stored.filename}"
        assert stored.size == 6
        assert stored.mime_type == "image/jpeg"
        assert (media_dir / stored.filename).read_bytes() == b"\xff\xd8jpeg"

    async def test_upload_many_files_get_distinct_names(self, service, make_order):
        await make_order("PO-1")

        stored = await service.upload(
            order_id="PO-1",
            category=MediaCategory.SAMPLES,
            files=[_file("a.png"), _file("a.png")],
            uploaded_by="Sarah",
        )

        assert len({f.filename for f in stored}) == 2

    async def test_upload_for_unknown_order(self, service):
        with pytest.raises(OrderNotFoundError):
            await service.upload(
                order_id="ghost",
                category=MediaCategory.OTHER,
                files=[_file()],
                uploaded_by="Sarah",
            )

    @pytest.mark.parametrize("content", [b"", b"x" * 1025])
    async def test_rejects_empty_or_oversized(
        self, service, make_order, storage, media_dir, content
    ):
        await make_order("PO-1")

        with pytest.raises(MediaValidationError):
            await service.upload(
                order_id="PO-1",
                category=MediaCategory.OTHER,
                files=[_file("ok.jpg"), _file("bad.jpg", content)],
                uploaded_by="Sarah",
            )

        assert list(await storage.media.list_files()) == []
        assert not media_dir.exists()

    async def test_rejects_empty_selection(self, service, make_order):
        await make_order("PO-1")

        with pytest.raises(MediaValidationError):
            await service.upload(
                order_id="PO-1",
                category=MediaCategory.OTHER,
                files=[],
                uploaded_by="Sarah",
            )


class TestDelete:
    async def test_delete_removes_record_and_file(self, service, make_order, media_dir):
        await make_order("PO-1")
        [stored] = await service.upload(
            order_id="PO-1",
            category=MediaCategory.OTHER,
            files=[_file()],
            uploaded_by="Sarah",
        )

        await service.delete_media(stored.id)

        assert not (media_dir / stored.filename).exists()
        with pytest.raises(MediaNotFoundError):
            await service.get_media(stored.id)

    async def test_delete_record_without_file(self, service, storage):
        record = await storage.media.create(
            order_id="PO-1",
            filename="gone.pdf",
            original_name="gone.pdf",
            size=1,
            mime_type="application/pdf",
            url="/uploads/gone.pdf",
            category=MediaCategory.SPECIFICATIONS,
            uploaded_by="Sarah",
        )

        await service.delete_media(record.id)

        assert await storage.media.get_by_id(record.id) is None

    async def test_delete_missing_raises(self, service):
        with pytest.raises(MediaNotFoundError):
            await service.delete_media("nope")
