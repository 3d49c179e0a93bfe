"""
Tests for TemporalFileManager.
"""
from moodjournal.core.temporal_files import TemporalFileManager


class TestTemporalFileManager:
    """Staging and cleanup of temporary files."""

    def test_uncommitted_files_are_removed(self, tmp_path):
        with TemporalFileManager(base_dir=tmp_path) as temp_manager:
            temp_file = temp_manager.create_temp_file(suffix=".txt")
            assert temp_file.exists()
        assert not temp_file.exists()

    def test_commit_moves_file(self, tmp_path):
        target = tmp_path / "out" / "data.txt"
        with TemporalFileManager(base_dir=tmp_path) as temp_manager:
            temp_file = temp_manager.create_temp_file(suffix=".txt")
            temp_file.write_text("hello", encoding="utf-8")
            temp_manager.commit(temp_file, target)

        assert target.read_text(encoding="utf-8") == "hello"
        assert not temp_file.exists()

    def test_cleanup_stats(self, tmp_path):
        temp_manager = TemporalFileManager(base_dir=tmp_path)
        temp_manager.create_temp_file()
        temp_manager.create_temp_file()
        assert temp_manager.cleanup() == {"files_removed": 2, "errors": 0}
