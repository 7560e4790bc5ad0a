"""
Tests for profile seeding and the seed_profile script.
"""

import importlib.util
import json
from pathlib import Path

import pytest

from app.domain.portfolio.entities import Proficiency
from app.domain.portfolio.errors import RecordValidationError
from app.infrastructure.database import build_engine, create_schema
from app.infrastructure.portfolio.profile_repository import ProfileRepositoryAdapter
from app.infrastructure.portfolio.seeding import (
    SeedConflictError,
    load_seed_file,
    parse_seed,
    seed_profile,
)
from tests.conftest import sample_profile, sample_skills

ROOT = Path(__file__).resolve().parent.parent
SEED_FILE = ROOT / "data" / "profile.json"


def _load_script():
    spec = importlib.util.spec_from_file_location(
        "seed_profile_script", ROOT / "scripts" / "seed_profile.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def repository(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'seed.db'}")
    create_schema(engine)
    yield ProfileRepositoryAdapter(engine=engine)
    engine.dispose()


class TestParseSeed:
    """Tests for reading seed documents."""

    def test_bundled_seed_file(self) -> None:
        seed = load_seed_file(SEED_FILE)

        assert seed.profile.name == "Jane Doe"
        assert seed.profile.experience
        assert {s.category for s in seed.skills} >= {"languages", "backend"}

    def test_display_order_follows_list_order(self) -> None:
        seed = parse_seed(
            {
                "profile": {"name": "A", "title": "T", "email": "a@b.co", "bio": "B"},
                "skills": {
                    "languages": [
                        {"name": "Python", "proficiency": "expert"},
                        {"name": "Kotlin"},
                    ]
                },
            }
        )

        assert [(s.name, s.display_order) for s in seed.skills] == [("Python", 0), ("Kotlin", 1)]
        assert seed.skills[1].proficiency is Proficiency.INTERMEDIATE

    def test_missing_required_field(self) -> None:
        with pytest.raises(RecordValidationError) as excinfo:
            parse_seed({"profile": {"name": "A"}})

        assert excinfo.value.violations[0][0] == "title"

    def test_unknown_proficiency(self) -> None:
        document = {
            "profile": {"name": "A", "title": "T", "email": "a@b.co", "bio": "B"},
            "skills": {"tools": [{"name": "Git", "proficiency": "wizard"}]},
        }

        with pytest.raises(RecordValidationError):
            parse_seed(document)


class TestSeedProfile:
    """Tests for writing seeds into the store."""

    def test_seeds_empty_store(self, repository) -> None:
        backup = seed_profile(repository, load_seed_file(SEED_FILE))

        assert backup is None
        assert repository.get_active_profile().name == "Jane Doe"

    def test_refuses_to_overwrite_without_replace(self, repository) -> None:
        repository.replace_all(sample_profile(), sample_skills())

        with pytest.raises(SeedConflictError):
            seed_profile(repository, load_seed_file(SEED_FILE))

    def test_replace_with_backup(self, repository, tmp_path) -> None:
        repository.replace_all(sample_profile(), sample_skills())

        backup = seed_profile(
            repository, load_seed_file(SEED_FILE), replace=True, backup_dir=tmp_path / "backups"
        )

        saved = json.loads(backup.read_text(encoding="utf-8"))
        assert saved["timestamp"]
        assert len(saved["skills"]) == len(sample_skills())
        assert [s.name for s in repository.list_active_skills("tools")] == ["Docker", "Git"]


class TestSeedScript:
    def test_exit_codes(self, tmp_path) -> None:
        script = _load_script()
        args = ["--database-url", f"sqlite:///{tmp_path / 'cli.db'}", "--file", str(SEED_FILE)]

        assert script.main(args) == 0
        assert script.main(args) == 1
        assert script.main(args + ["--replace", "--backup", str(tmp_path / "b")]) == 0
        assert list((tmp_path / "b").glob("backup-*.json"))

    def test_missing_file(self, tmp_path) -> None:
        script = _load_script()

        status = script.main(
            ["--database-url", f"sqlite:///{tmp_path / 'cli.db'}", "--file", str(tmp_path / "x.json")]
        )

        assert status == 2
