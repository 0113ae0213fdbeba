"""Unit tests for document augmentation.

Uses the in-memory repository so that the report block is deterministic.
"""

from pathlib import Path

import pytest

from reprodoc.augment import LAST_UPDATED_LINE, SEED_CHUNK_LABEL, SEPARATOR_LINE, SESSION_INFO_CHUNK_LABEL, augment, seed_chunk, session_info_chunk
from reprodoc.config import PROJECT_CONFIG_FILE
from reprodoc.domain import MalformedDocumentError, WorkflowConfig

from conftest import CODE_BODY, make_commit

pytestmark = pytest.mark.unit


def _read_lines(path: Path):
    lines = path.read_text(encoding="utf-8").split("\n")
    return lines[:-1] if lines and lines[-1] == "" else lines


def _contains_contiguous(haystack, needle) -> bool:
    n = len(needle)
    return any(list(haystack[i : i + n]) == list(needle) for i in range(len(haystack) - n + 1))


class TestBlocks:
    """Test construction of the inserted chunks."""

    def test_Should_BuildSeedChunk_When_CodeAndNumericSeed(self, tmp_path):
        config = WorkflowConfig(knit_root_dir=tmp_path, seed=12345)

        assert seed_chunk(config, has_code=True) == ["", f"```{{r {SEED_CHUNK_LABEL}, echo = FALSE}}", "set.seed(12345)", "```", ""]

    @pytest.mark.parametrize("seed", ["abc", [1, 2], None, True, float("nan")])
    def test_Should_OmitSeedChunk_When_SeedNotSingleNumber(self, tmp_path, seed):
        config = WorkflowConfig(knit_root_dir=tmp_path, seed=seed)

        assert seed_chunk(config, has_code=True) == []

    def test_Should_TruncateSeed_When_SeedIsFloat(self, tmp_path):
        config = WorkflowConfig(knit_root_dir=tmp_path, seed=7.9)

        assert "set.seed(7)" in seed_chunk(config, has_code=True)

    def test_Should_OmitBlocks_When_NoCode(self, tmp_path):
        config = WorkflowConfig(knit_root_dir=tmp_path)

        assert seed_chunk(config, has_code=False) == []
        assert session_info_chunk(config, has_code=False) == []

    def test_Should_BuildSessionInfoChunk_When_ExpressionSet(self, tmp_path):
        config = WorkflowConfig(knit_root_dir=tmp_path, sessioninfo="devtools::session_info()")

        chunk = session_info_chunk(config, has_code=True)

        assert chunk[1] == "## Session information"
        assert f"```{{r {SESSION_INFO_CHUNK_LABEL}}}" in chunk
        assert "devtools::session_info()" in chunk


class TestAugment:
    """Test the augmented document layout."""

    def test_Should_AssembleBlocksInOrder_When_CodeDocumentInRepository(self, tmp_path, code_document, fake_repo):
        fake_repo.histories["analysis/index.Rmd"] = [make_commit(1)]
        original = _read_lines(code_document)

        path, config = augment(code_document, destination=tmp_path / "out", repo=fake_repo)
        lines = _read_lines(path)

        header = original[:4]
        assert lines[:4] == header
        assert lines[4] == LAST_UPDATED_LINE
        assert lines[5:7] == ["", f"**Code version:** `{make_commit(99).short_id}`"]
        separator = lines.index(SEPARATOR_LINE, 4)
        seed_start = lines.index(f"```{{r {SEED_CHUNK_LABEL}, echo = FALSE}}")
        assert separator < seed_start
        assert lines[seed_start + 1] == "set.seed(12345)"
        body_start = seed_start + 4
        assert lines[body_start : body_start + len(CODE_BODY)] == CODE_BODY
        session_start = lines.index(f"```{{r {SESSION_INFO_CHUNK_LABEL}}}")
        assert session_start > body_start + len(CODE_BODY) - 1
        assert lines[session_start + 1] == "sessionInfo()"
        assert config.seed == 12345

    def test_Should_IncludeSourceHistory_When_DocumentCommitted(self, tmp_path, code_document, fake_repo):
        fake_repo.histories["analysis/index.Rmd"] = [make_commit(1)]

        path, _ = augment(code_document, destination=tmp_path / "out", repo=fake_repo)
        text = path.read_text(encoding="utf-8")

        assert "past versions of index.Rmd" in text
        assert make_commit(1).short_id in text

    def test_Should_OmitCodeBlocks_When_ProseOnly(self, tmp_path, prose_document, fake_repo):
        path, _ = augment(prose_document, destination=tmp_path / "out", repo=fake_repo)
        text = path.read_text(encoding="utf-8")

        assert SEED_CHUNK_LABEL not in text
        assert SESSION_INFO_CHUNK_LABEL not in text
        assert LAST_UPDATED_LINE in text

    def test_Should_OmitSessionInfo_When_ProjectDisablesIt(self, tmp_path, code_document, fake_repo):
        (tmp_path / PROJECT_CONFIG_FILE).write_text('sessioninfo: ""\n', encoding="utf-8")

        path, config = augment(code_document, destination=tmp_path / "out", repo=fake_repo)
        text = path.read_text(encoding="utf-8")

        assert config.sessioninfo == ""
        assert SESSION_INFO_CHUNK_LABEL not in text
        assert SEED_CHUNK_LABEL in text

    def test_Should_OmitSeed_When_SeedNotNumeric(self, tmp_path, write_document, fake_repo):
        doc = write_document(tmp_path / "index.Rmd", header=["reprodoc:", "  seed: random"])

        path, _ = augment(doc, destination=tmp_path / "out", repo=fake_repo)

        assert SEED_CHUNK_LABEL not in path.read_text(encoding="utf-8")

    def test_Should_OmitReport_When_OutsideRepository(self, tmp_path, code_document, monkeypatch):
        monkeypatch.setattr("reprodoc.augment.core.discover_repository", lambda path: None)
        monkeypatch.setattr("reprodoc.config.discover_repository", lambda path: None)

        path, _ = augment(code_document, destination=tmp_path / "out")
        text = path.read_text(encoding="utf-8")

        assert "**Code version:**" not in text
        assert SEED_CHUNK_LABEL in text
        assert SESSION_INFO_CHUNK_LABEL in text

    def test_Should_PreserveOriginalLines_When_Augmenting(self, tmp_path, code_document, fake_repo):
        original = _read_lines(code_document)

        path, _ = augment(code_document, destination=tmp_path / "out", repo=fake_repo)

        assert _contains_contiguous(_read_lines(path), original[4:])
        assert _read_lines(path)[:4] == original[:4]

    def test_Should_KeepBodyLineIntact_When_LineHoldsSeparatorCharacters(self, tmp_path, write_document, fake_repo):
        body_line = "Page one\x0cpage two \u2028 same line"
        doc = write_document(tmp_path / "analysis" / "index.Rmd", body=["", body_line, "```{r}", "1", "```"])

        path, _ = augment(doc, destination=tmp_path / "out", repo=fake_repo)

        assert body_line in _read_lines(path)

    def test_Should_Augment_When_HeaderUsesRCodeTags(self, tmp_path, write_document, fake_repo):
        header = ["title: x", "params:", "  date: !r Sys.Date()", "  n: !expr 10 * 2"]
        doc = write_document(tmp_path / "analysis" / "index.Rmd", header=header)

        path, _ = augment(doc, destination=tmp_path / "out", repo=fake_repo)

        assert _read_lines(path)[: len(header) + 2] == ["---", *header, "---"]

    def test_Should_LeaveSourceUntouched_When_Augmenting(self, tmp_path, code_document, fake_repo):
        before = code_document.read_bytes()

        augment(code_document, destination=tmp_path / "out", repo=fake_repo)

        assert code_document.read_bytes() == before

    def test_Should_WriteToTemporaryDirectory_When_NoDestination(self, code_document, fake_repo):
        path, _ = augment(code_document, repo=fake_repo)

        assert path.name == code_document.name
        assert path.parent != code_document.parent
        assert path.exists()

    def test_Should_RefuseToOverwriteSource_When_DestinationIsSourceDir(self, code_document, fake_repo):
        with pytest.raises(ValueError):
            augment(code_document, destination=code_document.parent, repo=fake_repo)

    def test_Should_RecordExplicitKnitRootDir_When_CallerOverrides(self, tmp_path, code_document, fake_repo):
        override = tmp_path / "workdir"

        _, config = augment(code_document, knit_root_dir=override, destination=tmp_path / "out", repo=fake_repo)

        assert config.knit_root_dir == override


class TestMalformed:
    """Test failure on documents without a metadata block."""

    def test_Should_RaiseAndWriteNothing_When_SingleDelimiter(self, tmp_path, fake_repo):
        doc = tmp_path / "broken.Rmd"
        doc.write_text("---\ntitle: x\n\n```{r}\n1\n```\n", encoding="utf-8")
        out = tmp_path / "out"

        with pytest.raises(MalformedDocumentError):
            augment(doc, destination=out, repo=fake_repo)

        assert not out.exists()
