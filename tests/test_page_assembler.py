"""Tests for issue page assembly."""

import random

import pytest

from editorial_desk.assembly import PageAssembler
from editorial_desk.exceptions import (
    DuplicateSubmissionError,
    InvalidTransitionError,
    StaleWriteError,
)


@pytest.fixture
def assembler(store, issue):
    return PageAssembler(store, issue).load()


def page_numbers(assembler):
    return [page.page_number for page in assembler.pages]


class TestEditorialAndToc:
    """Tests for editorial and table of contents pages."""

    def test_editorial_page_goes_first(self, assembler, make_submission):
        """Editorial pages are inserted at page 1, shifting the rest."""
        submission = make_submission()
        assembler.add_submission_page(submission)

        page = assembler.add_editorial_page("From the Editors", "Welcome to spring.")

        pages = assembler.pages
        assert pages[0] is page
        assert page.contributor_name == "Editorial Team"
        assert page.description == "Welcome to spring."
        assert page.issue_number == 7
        assert pages[1].submission_id == submission.id
        assert page_numbers(assembler) == [1, 2]

    def test_toc_lists_submission_pages(self, assembler, make_submission):
        """The TOC snapshot lists submission pages as number, title and author."""
        assembler.add_editorial_page("Welcome", "")
        assembler.add_submission_page(make_submission(title="Rain", author_name="Ana"))
        assembler.add_submission_page(make_submission(title="Snow", author_name="Ben"))

        toc = assembler.add_table_of_contents_page()

        assert toc.title == "Table of Contents"
        assert toc.description == "2. Rain - Ana\n3. Snow - Ben"
        assert assembler.pages[1] is toc
        assert page_numbers(assembler) == [1, 2, 3, 4]

    def test_toc_is_a_snapshot(self, assembler, make_submission):
        """Pages added after the TOC do not appear in it."""
        assembler.add_submission_page(make_submission(title="Rain", author_name="Ana"))
        toc = assembler.add_table_of_contents_page()

        assembler.add_submission_page(make_submission(title="Late", author_name="Cy"))

        assert "Late" not in toc.description

    def test_repeated_toc_appends(self, assembler, make_submission):
        """Each call adds a new TOC page at position 2."""
        assembler.add_editorial_page("Welcome", "")
        assembler.add_submission_page(make_submission())
        first = assembler.add_table_of_contents_page()

        second = assembler.add_table_of_contents_page()

        assert first.id != second.id
        assert [p.type for p in assembler.pages] == ["editorial", "toc", "toc", "submission"]
        assert assembler.pages[1] is second

    def test_toc_on_empty_issue(self, assembler):
        """With no pages the TOC becomes page 1."""
        toc = assembler.add_table_of_contents_page()

        assert toc.page_number == 1
        assert toc.description == ""


class TestSubmissionPages:
    """Tests for submission-backed pages."""

    def test_duplicate_rejected(self, assembler, make_submission):
        """A submission can back only one page; the failed add changes nothing."""
        submission = make_submission()
        assembler.add_submission_page(submission)

        with pytest.raises(DuplicateSubmissionError):
            assembler.add_submission_page(submission)

        assert len(assembler) == 1

    def test_trashed_rejected(self, assembler, make_submission):
        """Trashed submissions cannot be placed."""
        submission = make_submission(status="deleted", previous_status="accepted")

        with pytest.raises(InvalidTransitionError):
            assembler.add_submission_page(submission)

        assert len(assembler) == 0

    def test_description_truncated(self, assembler, make_submission):
        """The description is the first 200 characters of content."""
        page = assembler.add_submission_page(make_submission(content="x" * 450))

        assert page.description == "x" * 200

    def test_featured_image_preferred(self, assembler, make_submission):
        """The featured image is used when present."""
        page = assembler.add_submission_page(
            make_submission(type="photography", image_url="img.jpg", file_url="file.jpg")
        )

        assert page.image_url == "img.jpg"

    def test_file_url_fallback_for_image_types(self, assembler, make_submission):
        """Image-like types fall back to the file attachment."""
        page = assembler.add_submission_page(
            make_submission(type="visual-art", file_url="art.png")
        )

        assert page.image_url == "art.png"

    def test_no_fallback_for_writing(self, assembler, make_submission):
        """Written work does not use its document as an image."""
        page = assembler.add_submission_page(make_submission(type="poem", file_url="poem.pdf"))

        assert page.image_url is None


class TestMoveAndRemove:
    """Tests for reordering and removing pages."""

    def test_move_swaps_neighbours(self, assembler):
        """move_page swaps with the neighbour and renumbers both."""
        a = assembler.add_editorial_page("A", "")
        b = assembler.add_editorial_page("B", "")

        assembler.move_page(0, "down")

        assert [p.id for p in assembler.pages] == [a.id, b.id]
        assert a.page_number == 1
        assert b.page_number == 2

    def test_move_at_boundaries_is_noop(self, assembler):
        """Moving the first page up or the last down changes nothing."""
        assembler.add_editorial_page("A", "")
        assembler.add_editorial_page("B", "")
        before = [p.id for p in assembler.pages]

        assembler.move_page(0, "up")
        assembler.move_page(1, "down")

        assert [p.id for p in assembler.pages] == before

    def test_move_invalid_direction(self, assembler):
        """Only up and down are directions."""
        assembler.add_editorial_page("A", "")

        with pytest.raises(ValueError):
            assembler.move_page(0, "left")

    def test_remove_renumbers(self, assembler, make_submission):
        """Removing a page closes the gap."""
        for _ in range(4):
            assembler.add_submission_page(make_submission())

        removed = assembler.remove_page(1)

        assert len(assembler) == 3
        assert removed.id not in [p.id for p in assembler.pages]
        assert page_numbers(assembler) == [1, 2, 3]

    def test_out_of_range_index(self, assembler):
        """Indexes outside the page list raise IndexError."""
        with pytest.raises(IndexError):
            assembler.remove_page(0)
        with pytest.raises(IndexError):
            assembler.move_page(-1, "up")

    def test_numbers_stay_dense(self, assembler, make_submission):
        """Page numbers are 1..N after any mix of operations."""
        rng = random.Random(1234)
        for step in range(60):
            choice = rng.choice(["editorial", "toc", "submission", "move", "remove"])
            if choice == "editorial":
                assembler.add_editorial_page(f"E{step}", "")
            elif choice == "toc":
                assembler.add_table_of_contents_page()
            elif choice == "submission":
                assembler.add_submission_page(make_submission())
            elif len(assembler) and choice == "move":
                assembler.move_page(rng.randrange(len(assembler)), rng.choice(["up", "down"]))
            elif len(assembler):
                assembler.remove_page(rng.randrange(len(assembler)))

            assert page_numbers(assembler) == list(range(1, len(assembler) + 1))


class TestSave:
    """Tests for persisting layouts."""

    def test_save_and_reload(self, store, issue, assembler, make_submission):
        """A saved layout reloads with the same order."""
        assembler.add_submission_page(make_submission())
        assembler.add_editorial_page("Welcome", "")
        assembler.save()

        reloaded = PageAssembler(store, issue).load()

        assert [p.id for p in reloaded.pages] == [p.id for p in assembler.pages]
        assert reloaded.layout.revision == 1

    def test_concurrent_save_rejected(self, store, issue, make_submission):
        """The second of two editors saving the same revision is rejected."""
        first = PageAssembler(store, issue).load()
        second = PageAssembler(store, issue).load()
        first.add_editorial_page("Mine", "")
        second.add_editorial_page("Theirs", "")
        first.save()

        with pytest.raises(StaleWriteError):
            second.save()

        assert [p.title for p in PageAssembler(store, issue).load().pages] == ["Mine"]

    def test_remove_submission(self, assembler, make_submission):
        """remove_submission drops the backed page."""
        submission = make_submission()
        assembler.add_editorial_page("Welcome", "")
        assembler.add_submission_page(submission)

        assert assembler.remove_submission(submission.id) == 1
        assert assembler.find_submission_page(submission.id) is None
        assert page_numbers(assembler) == [1]
