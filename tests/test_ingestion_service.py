"""Tests for bulk ingestion."""

import os
from pathlib import Path

import pytest
from conftest import FakeTaskApi, make_task

from taskflow.api import RequestValidationError
from taskflow.models import PaginationMeta, ResultKind, TaskStats
from taskflow.services import (
    MAX_FILE_SIZE,
    IngestionService,
    IngestionSource,
    IngestionValidationError,
    StatsService,
    TaskStore,
)

MIB = 1024 * 1024


def sized_file(path: Path, size: int) -> Path:
    """Create a (sparse) file of exactly ``size`` bytes."""
    path.write_bytes(b"")
    os.truncate(path, size)
    return path


@pytest.fixture
def loaded(store: TaskStore) -> TaskStore:
    store.replace_page(
        [make_task(f"t{i}") for i in range(5)], PaginationMeta(total_items=5, total_pages=1)
    )
    return store


class TestValidation:
    """Tests for checks made before contacting the server."""

    def test_short_text_rejected(self, ingestion: IngestionService):
        with pytest.raises(IngestionValidationError, match="at least 10 characters"):
            ingestion.validate(IngestionSource(text="too short"))

    def test_ten_characters_accepted(self, ingestion: IngestionService):
        ingestion.validate(IngestionSource(text="0123456789"))

    def test_four_mib_txt_accepted(self, ingestion: IngestionService, tmp_path: Path):
        ingestion.validate(IngestionSource(file=sized_file(tmp_path / "notes.txt", 4 * MIB)))

    def test_exactly_max_size_accepted(self, ingestion: IngestionService, tmp_path: Path):
        ingestion.validate(IngestionSource(file=sized_file(tmp_path / "notes.md", MAX_FILE_SIZE)))

    def test_six_mib_md_rejected(self, ingestion: IngestionService, tmp_path: Path):
        with pytest.raises(IngestionValidationError, match="less than 5MB"):
            ingestion.validate(IngestionSource(file=sized_file(tmp_path / "notes.md", 6 * MIB)))

    @pytest.mark.parametrize("name", ["notes.pdf", "notes.docx", "notes"])
    def test_wrong_extension_rejected(
        self, ingestion: IngestionService, tmp_path: Path, name: str
    ):
        with pytest.raises(IngestionValidationError, match=".txt or .md"):
            ingestion.validate(IngestionSource(file=sized_file(tmp_path / name, 100)))

    def test_extension_check_ignores_case(self, ingestion: IngestionService, tmp_path: Path):
        ingestion.validate(IngestionSource(file=sized_file(tmp_path / "NOTES.TXT", 100)))

    def test_missing_file_rejected(self, ingestion: IngestionService, tmp_path: Path):
        with pytest.raises(IngestionValidationError, match="not found"):
            ingestion.validate(IngestionSource(file=tmp_path / "gone.txt"))

    def test_file_wins_over_short_text(self, ingestion: IngestionService, tmp_path: Path):
        source = IngestionSource(text="", file=sized_file(tmp_path / "notes.txt", 50))

        assert source.uses_file
        ingestion.validate(source)


class TestIngest:
    """Tests for ingest."""

    @pytest.mark.asyncio
    async def test_invalid_text_makes_no_request(
        self, ingestion: IngestionService, api: FakeTaskApi, loaded: TaskStore
    ):
        before = loaded.snapshot

        result = await ingestion.ingest(IngestionSource(text="short"))

        assert result.kind == ResultKind.INVALID
        assert api.calls == []
        assert loaded.snapshot is before

    @pytest.mark.asyncio
    async def test_oversized_file_makes_no_request(
        self, ingestion: IngestionService, api: FakeTaskApi, tmp_path: Path
    ):
        result = await ingestion.ingest(
            IngestionSource(file=sized_file(tmp_path / "big.md", 6 * MIB))
        )

        assert result.kind == ResultKind.INVALID
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_parsed_tasks_appended(
        self, ingestion: IngestionService, api: FakeTaskApi, loaded: TaskStore
    ):
        api.parsed = [make_task("p1"), make_task("p2"), make_task("p3")]

        result = await ingestion.ingest(IngestionSource(text="Call the vendor by Friday"))

        assert result.ok
        assert result.inserted_count == 3
        assert result.message == "Successfully parsed and created 3 tasks!"
        assert [t.id for t in loaded.tasks] == ["t0", "t1", "t2", "t3", "t4", "p1", "p2", "p3"]
        assert loaded.pagination.total_items == 5

    @pytest.mark.asyncio
    async def test_no_list_refetch_after_ingestion(
        self, ingestion: IngestionService, api: FakeTaskApi, loaded: TaskStore
    ):
        api.parsed = [make_task("p1")]

        await ingestion.ingest(IngestionSource(text="Call the vendor by Friday"))

        assert api.calls_to("list_tasks") == []

    @pytest.mark.asyncio
    async def test_stats_refreshed_without_list_refetch(
        self,
        ingestion: IngestionService,
        api: FakeTaskApi,
        loaded: TaskStore,
        stats_service: StatsService,
    ):
        api.parsed = [make_task("p1"), make_task("p2")]
        api.stats = TaskStats(total=7)

        await ingestion.ingest(IngestionSource(text="Call the vendor by Friday"))

        assert len(api.calls_to("get_stats")) == 1
        assert api.calls_to("list_tasks") == []
        assert stats_service.stats.total == 7

    @pytest.mark.asyncio
    async def test_empty_parse_leaves_stats_alone(
        self, ingestion: IngestionService, api: FakeTaskApi
    ):
        await ingestion.ingest(IngestionSource(text="Nothing actionable here."))

        assert api.calls_to("get_stats") == []

    @pytest.mark.asyncio
    async def test_empty_parse_is_non_fatal(
        self, ingestion: IngestionService, api: FakeTaskApi, loaded: TaskStore
    ):
        before = loaded.tasks

        result = await ingestion.ingest(IngestionSource(text="Nothing actionable here."))

        assert result.kind == ResultKind.EMPTY
        assert result.message == "No tasks could be extracted from the text"
        assert result.inserted_count == 0
        assert loaded.tasks == before

    @pytest.mark.asyncio
    async def test_file_sent_instead_of_text(
        self, ingestion: IngestionService, api: FakeTaskApi, tmp_path: Path
    ):
        path = tmp_path / "notes.txt"
        path.write_text("- email Dana the budget\n")
        api.parsed = [make_task("p1")]

        result = await ingestion.ingest(IngestionSource(text="ignored text here", file=path))

        assert result.ok
        assert api.calls_to("parse_file") == [path]
        assert api.calls_to("parse_text") == []

    @pytest.mark.asyncio
    async def test_remote_failure_surfaces_server_message(
        self, ingestion: IngestionService, api: FakeTaskApi, loaded: TaskStore
    ):
        api.errors["parse_text"] = RequestValidationError(
            "HTTP 400", status_code=400, server_message="Text is too long"
        )
        before = loaded.tasks

        result = await ingestion.ingest(IngestionSource(text="Call the vendor by Friday"))

        assert result.kind == ResultKind.REMOTE
        assert result.message == "Text is too long"
        assert loaded.tasks == before
        assert not loaded.is_action_loading(IngestionService.ACTION)

    @pytest.mark.asyncio
    async def test_remote_failure_generic_message(
        self, ingestion: IngestionService, api: FakeTaskApi
    ):
        api.errors["parse_text"] = RequestValidationError("HTTP 422", status_code=422)

        result = await ingestion.ingest(IngestionSource(text="Call the vendor by Friday"))

        assert result.message == "Failed to parse text"

    @pytest.mark.asyncio
    async def test_busy_while_parsing(self, ingestion: IngestionService, store: TaskStore):
        store.set_action_loading(IngestionService.ACTION, True)

        result = await ingestion.ingest(IngestionSource(text="Call the vendor by Friday"))

        assert result.kind == ResultKind.BUSY
