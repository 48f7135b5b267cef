from clickwheel.ui.workers.import_worker import ImportWorker


class TestImportWorker:
    """Tests for the background import thread body."""

    def _run(self, worker):
        errors, reports = [], []
        worker.error_signal.connect(errors.append)
        worker.finished_signal.connect(reports.append)
        worker.run()
        return errors, reports

    def test_unopenable_library_reports_error(self, tmp_path):
        """Test a library that cannot be opened is an error, not a skip count."""
        worker = ImportWorker(str(tmp_path / "missing" / "lib.sqlite3"), [str(tmp_path)])
        errors, reports = self._run(worker)
        assert reports == []
        (error,) = errors
        assert error.startswith("Could not add music: Cannot open library at")

    def test_imports_into_file_library(self, tmp_path):
        """Test files land in the library the worker opens itself."""
        (tmp_path / "Band - Tune.mp3").write_bytes(b"not really audio")
        worker = ImportWorker(str(tmp_path / "lib.sqlite3"), [str(tmp_path / "Band - Tune.mp3")])
        errors, reports = self._run(worker)
        assert errors == []
        (report,) = reports
        assert (report.attempted, report.imported, report.skipped) == (1, 1, 0)
