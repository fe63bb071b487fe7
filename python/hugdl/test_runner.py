import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import MagicMock, patch

from hugdl.entity import DownloadConfiguration
from hugdl.errors import LocalIOError, RemoteError
from hugdl.runner import run


def _response(status=200, body=None, chunks=()):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    resp.iter_content.return_value = iter(chunks)
    return resp


def _session(routes):
    """Fake session answering GETs from a {url: response} map."""
    session = MagicMock()
    session.get.side_effect = lambda url, **kwargs: routes[url]
    return session


class TestRun(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config = DownloadConfiguration.create("org/model", self._tmp.name, show_progress=False)
        self.listing = "https://huggingface.co/api/models/org/model/tree/main"
        self.resolve = "https://huggingface.co/org/model/resolve/main/"

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, session):
        out = io.StringIO()
        with redirect_stdout(out):
            summary = run(self.config, session=session)
        return summary, out.getvalue()

    def test_directory_entries_are_skipped(self):
        session = _session({
            self.listing: _response(body=[
                {"type": "file", "path": "config.json", "size": 10},
                {"type": "directory", "path": "subdir"},
            ]),
            self.resolve + "config.json": _response(chunks=[b"0123456789"]),
        })

        summary, out = self._run(session)

        self.assertEqual((summary.succeeded, summary.total), (1, 1))
        self.assertIn("1/1 files downloaded successfully", out)
        self.assertEqual(os.listdir(self.config.model_dir), ["config.json"])
        self.assertEqual(os.path.basename(self.config.model_dir), "org_model")

    def test_failed_file_does_not_stop_the_run(self):
        session = _session({
            self.listing: _response(body=[
                {"type": "file", "path": "a.txt", "size": 1},
                {"type": "file", "path": "b.txt", "size": 1},
                {"type": "file", "path": "c.txt", "size": 1},
            ]),
            self.resolve + "a.txt": _response(chunks=[b"a"]),
            self.resolve + "b.txt": _response(status=404),
            self.resolve + "c.txt": _response(chunks=[b"c"]),
        })

        summary, out = self._run(session)

        self.assertEqual((summary.succeeded, summary.failed, summary.total), (2, 1, 3))
        self.assertIn("2/3 files downloaded successfully", out)
        failed = [o for o in summary.outcomes if not o.ok]
        self.assertEqual(failed[0].entry.name, "b.txt")
        self.assertIsInstance(failed[0].error, RemoteError)
        # downloads happen in listing order
        urls = [c.args[0] for c in session.get.call_args_list]
        self.assertEqual(urls, [self.listing] + [self.resolve + n for n in ("a.txt", "b.txt", "c.txt")])

    def test_second_of_two_fails(self):
        session = _session({
            self.listing: _response(body=[
                {"type": "file", "path": "a.txt"},
                {"type": "file", "path": "b.txt"},
            ]),
            self.resolve + "a.txt": _response(chunks=[b"a"]),
            self.resolve + "b.txt": _response(status=404),
        })
        summary, out = self._run(session)
        self.assertIn("1/2 files downloaded successfully", out)

    def test_listing_failure_propagates_before_directory_creation(self):
        session = _session({self.listing: _response(status=401)})
        with self.assertRaises(RemoteError):
            self._run(session)
        self.assertFalse(os.path.exists(self.config.model_dir))

    def test_directory_failure_propagates(self):
        session = _session({self.listing: _response(body=[])})
        with patch("hugdl.utils.os.makedirs", side_effect=PermissionError(13, "Permission denied")):
            with self.assertRaises(LocalIOError):
                self._run(session)

    def test_empty_listing_reports_zero(self):
        summary, out = self._run(_session({self.listing: _response(body=[])}))
        self.assertEqual(summary.total, 0)
        self.assertIn("0/0 files downloaded successfully", out)
        self.assertTrue(os.path.isdir(self.config.model_dir))

    def test_size_mismatch_is_informational(self):
        session = _session({
            self.listing: _response(body=[{"type": "file", "path": "a.txt", "size": 99}]),
            self.resolve + "a.txt": _response(chunks=[b"abc"]),
        })
        summary, _ = self._run(session)
        self.assertEqual(summary.succeeded, 1)
        self.assertTrue(summary.outcomes[0].size_mismatch)

    def test_duplicate_base_names_are_warned(self):
        session = _session({
            self.listing: _response(body=[
                {"type": "file", "path": "a/model.bin"},
                {"type": "file", "path": "b/model.bin"},
            ]),
            self.resolve + "a/model.bin": _response(chunks=[b"first"]),
            self.resolve + "b/model.bin": _response(chunks=[b"second"]),
        })
        with self.assertLogs("hugdl.runner", level="WARNING"):
            self._run(session)
        with open(os.path.join(self.config.model_dir, "model.bin"), "rb") as f:
            self.assertEqual(f.read(), b"second")


if __name__ == "__main__":
    unittest.main()
