"""Tests for background file jobs."""

from __future__ import annotations

import tempfile
import time
import unittest
import zipfile
from pathlib import Path
from unittest import mock

from foldview.jobs import (
    CopyJob,
    ExtractJob,
    JobQueue,
    JobStatus,
    MoveJob,
    TrashJob,
    run_job,
)


class JobQueueTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        self.queue = JobQueue()

    def test_copy_file_and_directory(self) -> None:
        (self.root / "src.txt").write_text("payload", encoding="utf-8")
        (self.root / "tree" / "nested").mkdir(parents=True)
        (self.root / "tree" / "nested" / "leaf.txt").write_text("leaf", encoding="utf-8")

        file_job = self.queue.submit(CopyJob(self.root / "src.txt", self.root / "copy.txt"))
        tree_job = self.queue.submit(CopyJob(self.root / "tree", self.root / "tree-copy"))

        self.assertTrue(self.queue.wait(file_job, timeout=5).is_complete())
        self.assertTrue(self.queue.wait(tree_job, timeout=5).is_complete())
        self.assertEqual((self.root / "copy.txt").read_text(encoding="utf-8"), "payload")
        self.assertTrue((self.root / "tree-copy" / "nested" / "leaf.txt").is_file())
        self.assertTrue((self.root / "src.txt").exists())

    def test_move_relocates_source(self) -> None:
        (self.root / "old.txt").write_text("x", encoding="utf-8")

        job_id = self.queue.submit(MoveJob(self.root / "old.txt", self.root / "new.txt"))

        self.assertTrue(self.queue.wait(job_id, timeout=5).is_complete())
        self.assertFalse((self.root / "old.txt").exists())
        self.assertTrue((self.root / "new.txt").exists())

    def test_trash_hands_path_to_send2trash(self) -> None:
        (self.root / "junk.txt").write_text("junk", encoding="utf-8")

        with mock.patch("foldview.jobs.send2trash") as trash:
            job_id = self.queue.submit(TrashJob(self.root / "junk.txt"))
            job = self.queue.wait(job_id, timeout=5)

        self.assertTrue(job.is_complete())
        trash.assert_called_once_with(str(self.root / "junk.txt"))

    def test_trash_failure_is_recorded(self) -> None:
        with mock.patch("foldview.jobs.send2trash", side_effect=OSError("no trash can")):
            job_id = self.queue.submit(TrashJob(self.root / "junk.txt"))
            job = self.queue.wait(job_id, timeout=5)

        self.assertIs(job.status, JobStatus.FAILED)
        self.assertEqual(job.error, "no trash can")

    def test_extract_job_unpacks_archive(self) -> None:
        archive = self.root / "bundle.zip"
        with zipfile.ZipFile(archive, "w") as handle:
            handle.writestr("inside/file.txt", "data")

        job_id = self.queue.submit(ExtractJob(archive, self.root / "out"))

        self.assertTrue(self.queue.wait(job_id, timeout=5).is_complete())
        self.assertEqual((self.root / "out" / "inside" / "file.txt").read_text(encoding="utf-8"), "data")

    def test_failure_is_recorded_with_error(self) -> None:
        job_id = self.queue.submit(CopyJob(self.root / "missing.txt", self.root / "dest.txt"))

        job = self.queue.wait(job_id, timeout=5)

        self.assertIs(job.status, JobStatus.FAILED)
        self.assertTrue(job.error)
        self.assertEqual(self.queue.failed_jobs(), [job])
        self.assertFalse(self.queue.has_active_jobs())

    def test_poll_drains_updates_in_order(self) -> None:
        (self.root / "src.txt").write_text("x", encoding="utf-8")
        job_id = self.queue.submit(CopyJob(self.root / "src.txt", self.root / "dst.txt"))

        updates = []
        deadline = time.monotonic() + 5
        while self.queue.get(job_id).is_active() and time.monotonic() < deadline:
            updates.extend(self.queue.poll())
            time.sleep(0.01)

        self.assertEqual([update.status for update in updates], [JobStatus.RUNNING, JobStatus.COMPLETE])
        self.assertEqual(self.queue.poll(), [])
        self.assertTrue(self.queue.get(job_id).is_complete())

    def test_updates_consumed_by_wait_are_still_polled(self) -> None:
        (self.root / "one.txt").write_text("1", encoding="utf-8")
        (self.root / "two.txt").write_text("2", encoding="utf-8")
        first = self.queue.submit(CopyJob(self.root / "one.txt", self.root / "one-copy.txt"))
        second = self.queue.submit(CopyJob(self.root / "two.txt", self.root / "two-copy.txt"))
        self.queue.wait(first, timeout=5)
        self.queue.wait(second, timeout=5)

        updates = self.queue.poll()

        completed = [update.job_id for update in updates if update.status is JobStatus.COMPLETE]
        self.assertEqual(sorted(completed), [first, second])
        self.assertEqual(self.queue.poll(), [])

    def test_clear_finished_keeps_failed_jobs(self) -> None:
        (self.root / "src.txt").write_text("x", encoding="utf-8")
        ok = self.queue.submit(CopyJob(self.root / "src.txt", self.root / "dst.txt"))
        bad = self.queue.submit(MoveJob(self.root / "missing", self.root / "elsewhere"))
        self.queue.wait(ok, timeout=5)
        self.queue.wait(bad, timeout=5)

        self.queue.clear_finished()

        self.assertEqual([job.id for job in self.queue.all_jobs()], [bad])

    def test_descriptions_name_the_paths(self) -> None:
        self.assertEqual(CopyJob(Path("/a/x.txt"), Path("/b/y.txt")).description, "Copy x.txt -> y.txt")
        self.assertEqual(TrashJob(Path("/a/x.txt")).description, "Trash x.txt")
        self.assertEqual(ExtractJob(Path("/a/x.zip"), Path("/b")).description, "Extract x.zip")

    def test_run_job_rejects_unknown_kind(self) -> None:
        with self.assertRaises(TypeError):
            run_job("not a job")


if __name__ == "__main__":
    unittest.main()
