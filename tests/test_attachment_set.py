"""Tests for submission document attachments."""

from unittest.mock import MagicMock, patch

import pytest

from editorial_desk.attachments import (
    MAX_DOCUMENT_SIZE,
    MAX_IMAGE_SIZE,
    AttachmentSet,
    LocalBlobStorage,
    format_file_size,
    validate_upload,
)
from editorial_desk.attachments.pdf_pages import measure_pages
from editorial_desk.clients import ConnectionError
from editorial_desk.exceptions import (
    FileTooLargeError,
    PermissionDeniedError,
    RecordNotFoundError,
    StaleWriteError,
    UnsupportedTypeError,
)
from schemas import UploadFile

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def attachments(store, blob_storage, editor):
    return AttachmentSet(store, blob_storage, editor)


class TestValidation:
    """Tests for MIME and size validation."""

    @pytest.mark.parametrize(
        "content_type,kind",
        [
            ("application/pdf", "document"),
            ("application/msword", "document"),
            (DOCX, "document"),
            ("text/plain; charset=utf-8", "document"),
            ("image/jpeg", "image"),
            ("image/webp", "image"),
        ],
    )
    def test_allowed_types(self, content_type, kind):
        """Allow-listed types are classified as documents or images."""
        assert validate_upload(UploadFile(file_name="f", content_type=content_type, data=b"x")) == kind

    def test_unsupported_type(self):
        """Types outside the allow-lists are rejected."""
        with pytest.raises(UnsupportedTypeError) as exc_info:
            validate_upload(UploadFile(file_name="clip.mp4", content_type="video/mp4", data=b"x"))

        assert exc_info.value.content_type == "video/mp4"

    def test_image_limit(self):
        """Images over 5 MB are rejected."""
        with pytest.raises(FileTooLargeError) as exc_info:
            validate_upload(
                UploadFile(file_name="big.png", content_type="image/png", data=b"x" * (MAX_IMAGE_SIZE + 1))
            )

        assert exc_info.value.limit == MAX_IMAGE_SIZE

    def test_document_limit_is_larger(self):
        """A 6 MB PDF is fine while a 6 MB image is not."""
        data = b"x" * (6 * 1024 * 1024)

        assert validate_upload(UploadFile(file_name="a.pdf", content_type="application/pdf", data=data)) == "document"
        with pytest.raises(FileTooLargeError):
            validate_upload(UploadFile(file_name="a.png", content_type="image/png", data=data))

    def test_format_file_size(self):
        """Sizes are formatted with binary units."""
        assert format_file_size(0) == "0 Bytes"
        assert format_file_size(512) == "512 Bytes"
        assert format_file_size(MAX_DOCUMENT_SIZE) == "10 MB"


class TestAttach:
    """Tests for attaching documents."""

    def test_attach_pdf_counts_pages(self, attachments, store, make_submission, make_pdf):
        """Attached PDFs are stored with their page count."""
        submission = make_submission()

        document = attachments.attach(
            submission.id, UploadFile(file_name="story.pdf", content_type="application/pdf", data=make_pdf(3))
        )

        stored = store.get_submission(submission.id)
        assert [d.id for d in stored.documents] == [document.id]
        assert document.page_count == 3
        assert document.url.startswith("file://")
        assert document.size > 0

    def test_attach_appends_in_order(self, attachments, store, make_submission):
        """New attachments go to the end of the list."""
        submission = make_submission()

        first = attachments.attach(submission.id, UploadFile(file_name="a.txt", content_type="text/plain", data=b"a"))
        second = attachments.attach(submission.id, UploadFile(file_name="b.jpg", content_type="image/jpeg", data=b"b"))

        stored = store.get_submission(submission.id)
        assert [d.id for d in stored.documents] == [first.id, second.id]
        assert first.page_count is None
        assert second.page_count == 1

    def test_twelve_megabyte_file_rejected(self, store, editor, make_submission):
        """A 12 MB file fails before upload and documents are unchanged."""
        blobs = MagicMock()
        submission = make_submission()
        attachments = AttachmentSet(store, blobs, editor)

        with pytest.raises(FileTooLargeError):
            attachments.attach(
                submission.id,
                UploadFile(file_name="huge.pdf", content_type="application/pdf", data=b"x" * (12 * 1024 * 1024)),
            )

        assert store.get_submission(submission.id).documents == []
        blobs.upload.assert_not_called()

    def test_failed_upload_leaves_documents(self, store, editor, make_submission):
        """An upload failure creates no attachment."""
        blobs = MagicMock()
        blobs.upload.side_effect = ConnectionError("storage unreachable")
        submission = make_submission()

        with pytest.raises(ConnectionError):
            AttachmentSet(store, blobs, editor).attach(
                submission.id, UploadFile(file_name="a.txt", content_type="text/plain", data=b"a")
            )

        assert store.get_submission(submission.id).documents == []

    def test_failed_record_removes_blob(self, store, editor, make_submission):
        """If recording fails after upload, the uploaded blob is deleted."""
        blobs = MagicMock()
        blobs.upload.return_value = "https://cdn/a.txt"
        record_store = MagicMock(wraps=store)
        record_store.update_submission.side_effect = StaleWriteError("Submission", "s", 0, 1)
        submission = make_submission()

        with pytest.raises(StaleWriteError):
            AttachmentSet(record_store, blobs, editor).attach(
                submission.id, UploadFile(file_name="a.txt", content_type="text/plain", data=b"a")
            )

        blobs.delete.assert_called_once_with("https://cdn/a.txt")

    def test_unreadable_pdf_has_unknown_pages(self, attachments, make_submission):
        """A PDF that cannot be parsed is attached without a page count."""
        submission = make_submission()

        document = attachments.attach(
            submission.id, UploadFile(file_name="bad.pdf", content_type="application/pdf", data=b"not really a pdf")
        )

        assert document.page_count is None

    @patch("editorial_desk.attachments.pdf_pages.fitz.open")
    def test_pdf_closed_when_counting_fails(self, mock_open):
        """The parsed document is closed even if counting its pages fails."""
        doc = MagicMock()
        doc.__enter__.return_value = doc
        doc.__len__.side_effect = RuntimeError("broken xref")
        mock_open.return_value = doc

        upload = UploadFile(file_name="a.pdf", content_type="application/pdf", data=b"%PDF")

        assert measure_pages(upload) is None
        doc.__exit__.assert_called_once()

    def test_contributor_attaches_to_own(self, store, blob_storage, contributor, make_submission):
        """Owners may attach files before acceptance."""
        submission = make_submission(submitted_by=contributor.email)

        AttachmentSet(store, blob_storage, contributor).attach(
            submission.id, UploadFile(file_name="a.txt", content_type="text/plain", data=b"a")
        )

        assert len(store.get_submission(submission.id).documents) == 1

    def test_contributor_cannot_attach_after_acceptance(
        self, store, blob_storage, contributor, make_submission
    ):
        """Owners lose attach rights once accepted."""
        submission = make_submission(submitted_by=contributor.email, status="accepted")

        with pytest.raises(PermissionDeniedError):
            AttachmentSet(store, blob_storage, contributor).attach(
                submission.id, UploadFile(file_name="a.txt", content_type="text/plain", data=b"a")
            )


class TestDetachAndMetadata:
    """Tests for removing and describing attachments."""

    def test_detach_keeps_siblings(self, attachments, store, blob_storage, make_submission):
        """Detaching removes the blob and leaves siblings untouched."""
        submission = make_submission()
        docs = [
            attachments.attach(submission.id, UploadFile(file_name=f"{n}.txt", content_type="text/plain", data=n.encode()))
            for n in ("a", "b", "c")
        ]

        attachments.detach(submission.id, docs[1].id)

        stored = store.get_submission(submission.id)
        assert [d.id for d in stored.documents] == [docs[0].id, docs[2].id]
        assert [d.file_name for d in stored.documents] == ["a.txt", "c.txt"]
        assert not blob_storage.path_for(docs[1].url).exists()
        assert blob_storage.path_for(docs[0].url).exists()

    def test_detach_unknown(self, attachments, make_submission):
        """Detaching an unknown document raises RecordNotFoundError."""
        submission = make_submission()

        with pytest.raises(RecordNotFoundError):
            attachments.detach(submission.id, "missing")

    def test_update_metadata_merges(self, attachments, store, make_submission):
        """Metadata updates merge and never touch the file fields."""
        submission = make_submission()
        document = attachments.attach(submission.id, UploadFile(file_name="a.txt", content_type="text/plain", data=b"a"))

        attachments.update_metadata(submission.id, document.id, title="Part one")
        updated = attachments.update_metadata(submission.id, document.id, page_number=2)

        assert updated.metadata.title == "Part one"
        assert updated.metadata.page_number == 2
        stored = store.get_submission(submission.id).documents[0]
        assert stored.url == document.url
        assert stored.file_name == "a.txt"

    def test_update_metadata_rejects_file_fields(self, attachments, make_submission):
        """Only title, description and page_number can be set."""
        submission = make_submission()
        document = attachments.attach(submission.id, UploadFile(file_name="a.txt", content_type="text/plain", data=b"a"))

        with pytest.raises(ValueError):
            attachments.update_metadata(submission.id, document.id, url="https://elsewhere")


class TestPageSequence:
    """Tests for flattening attachments into pages."""

    def test_sequence_follows_list_order(self, attachments, store, make_submission, make_pdf):
        """Pages run through each document in attachment order."""
        submission = make_submission()
        pdf = attachments.attach(submission.id, UploadFile(file_name="a.pdf", content_type="application/pdf", data=make_pdf(2)))
        image = attachments.attach(submission.id, UploadFile(file_name="b.png", content_type="image/png", data=b"png"))
        text = attachments.attach(submission.id, UploadFile(file_name="c.txt", content_type="text/plain", data=b"txt"))

        sequence = AttachmentSet.page_sequence(store.get_submission(submission.id))

        assert [(doc.id, index) for doc, index in sequence] == [
            (pdf.id, 0),
            (pdf.id, 1),
            (image.id, 0),
            (text.id, 0),
        ]


class TestLocalBlobStorage:
    """Tests for the local blob store."""

    def test_upload_and_delete(self, tmp_path):
        """Uploaded files land in a bucket and can be deleted."""
        storage = LocalBlobStorage(tmp_path)

        url = storage.upload(UploadFile(file_name="My Poem.txt", content_type="text/plain", data=b"hello"))
        path = storage.path_for(url)

        assert path.parent.name == "documents"
        assert path.name.endswith("My_Poem.txt")
        assert path.read_bytes() == b"hello"
        storage.delete(url)
        assert not path.exists()

    def test_foreign_urls_ignored(self, tmp_path):
        """URLs outside the root are left alone."""
        storage = LocalBlobStorage(tmp_path / "blobs")
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")

        storage.delete(outside.as_uri())
        storage.delete("https://cdn.example.org/a.png")

        assert outside.exists()
