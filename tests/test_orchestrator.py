import tempfile
import unittest
from pathlib import Path
from unittest import mock

import cv2
import numpy as np

from facefit.core.config import Configuration, Mode
from facefit.errors import ResourceError
from facefit.io.pts import load_points
from facefit.orchestrator import RunOutcome, discipline_for, run
from facefit.tracking.session import Discipline
from tests.fakes import FakeCapture, FakeTracker, RecordingViewer


def loader_for(tracker):
    return lambda config: (tracker, {"conf": 0.25})


class OrchestratorTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write_images(self, count):
        paths = []
        for idx in range(count):
            path = self.root / f"face{idx}.png"
            cv2.imwrite(str(path), np.full((12, 12, 3), 40 + idx, dtype=np.uint8))
            paths.append(str(path))
        return paths

    def write_list(self, name, entries):
        path = self.root / name
        path.write_text("\n".join(entries) + "\n", encoding="utf-8")
        return str(path)

    def test_image_mode_displays_all_points(self):
        image = self.write_images(1)[0]
        tracker = FakeTracker([7], points=68)
        viewer = RecordingViewer()
        summary = run(Configuration(threshold=5), Mode.IMAGE, image, loader=loader_for(tracker), viewer=viewer)
        self.assertIs(summary.outcome, RunOutcome.COMPLETED)
        self.assertEqual(len(viewer.shapes), 1)
        self.assertEqual(viewer.shapes[0].shape, (68, 2))
        self.assertEqual(tracker.calls, ["new_frame"])
        self.assertTrue(tracker.closed)
        self.assertTrue(viewer.closed)

    def test_image_mode_saves_without_display(self):
        image = self.write_images(1)[0]
        target = self.root / "out" / "face.pts"
        viewer = RecordingViewer()
        summary = run(
            Configuration(),
            Mode.IMAGE,
            image,
            str(target),
            loader=loader_for(FakeTracker([9], points=5)),
            viewer=viewer,
        )
        self.assertEqual(summary.persisted, 1)
        self.assertEqual(load_points(target).shape, (5, 2))
        self.assertEqual(viewer.shapes, [])

    def test_list_mode_rejected_item_is_neither_written_nor_shown(self):
        images = self.write_images(3)
        outputs = [str(self.root / f"face{idx}.pts") for idx in range(3)]
        tracker = FakeTracker([7, 3, 7])
        viewer = RecordingViewer()
        summary = run(
            Configuration(threshold=5, wait_time=1.0 / 30),
            Mode.LISTS,
            self.write_list("in.txt", images),
            self.write_list("out.txt", outputs),
            loader=loader_for(tracker),
            viewer=viewer,
        )
        self.assertEqual([Path(p).exists() for p in outputs], [True, False, True])
        self.assertEqual(viewer.shapes, [])
        self.assertEqual(tracker.resets, 1)
        self.assertEqual((summary.items, summary.accepted, summary.rejected), (3, 2, 1))

    def test_list_mode_without_outputs_shows_every_item(self):
        images = self.write_images(3)
        tracker = FakeTracker([7, 3, 7])
        viewer = RecordingViewer()
        run(
            Configuration(threshold=5),
            Mode.LISTS,
            self.write_list("in.txt", images),
            loader=loader_for(tracker),
            viewer=viewer,
        )
        self.assertEqual([len(shape) for shape in viewer.shapes], [68, 0, 68])
        self.assertEqual(tracker.calls, ["new_frame"] * 3)

    def test_list_mode_verbose_shows_rejected_items(self):
        images = self.write_images(2)
        outputs = [str(self.root / f"face{idx}.pts") for idx in range(2)]
        viewer = RecordingViewer()
        with mock.patch("builtins.print"):
            summary = run(
                Configuration(verbose=True),
                Mode.LISTS,
                self.write_list("in.txt", images),
                self.write_list("out.txt", outputs),
                loader=loader_for(FakeTracker([1, 8])),
                viewer=viewer,
            )
        self.assertEqual([len(shape) for shape in viewer.shapes], [0, 68])
        self.assertEqual(summary.persisted, 1)
        self.assertFalse(Path(outputs[0]).exists())

    def test_list_length_mismatch_releases_tracker(self):
        images = self.write_images(2)
        tracker = FakeTracker([7])
        with self.assertRaises(ResourceError):
            run(
                Configuration(),
                Mode.LISTS,
                self.write_list("in.txt", images),
                self.write_list("out.txt", ["only.pts"]),
                loader=loader_for(tracker),
                viewer=RecordingViewer(),
            )
        self.assertEqual(tracker.calls, [])
        self.assertTrue(tracker.closed)

    def test_video_mode_tracks_and_names_outputs_by_frame(self):
        frames = [np.full((6, 6, 3), i, dtype=np.uint8) for i in range(4)]
        capture = FakeCapture(frames)
        tracker = FakeTracker([6, 2, 6, 6], points=3)
        template = str(self.root / "frames" / "%04d.pts")
        with mock.patch("facefit.io.video.cv2.VideoCapture", return_value=capture):
            summary = run(
                Configuration(wait_time=1.0 / 30),
                Mode.VIDEO,
                "clip.avi",
                template,
                loader=loader_for(tracker),
                viewer=RecordingViewer(),
            )
        written = sorted(p.name for p in (self.root / "frames").iterdir())
        self.assertEqual(written, ["0001.pts", "0003.pts", "0004.pts"])
        self.assertEqual(tracker.calls, ["track"] * 4)
        self.assertIs(summary.outcome, RunOutcome.COMPLETED)
        self.assertTrue(capture.released)

    def test_cancellation_stops_the_whole_run(self):
        frames = [np.zeros((6, 6, 3), dtype=np.uint8) for _ in range(5)]
        capture = FakeCapture(frames)
        tracker = FakeTracker([7])
        viewer = RecordingViewer(cancel_at=2)
        with mock.patch("facefit.io.video.cv2.VideoCapture", return_value=capture):
            summary = run(Configuration(), Mode.VIDEO, "clip.avi", loader=loader_for(tracker), viewer=viewer)
        self.assertIs(summary.outcome, RunOutcome.CANCELLED)
        self.assertEqual(summary.items, 2)
        self.assertEqual(len(tracker.calls), 2)
        self.assertTrue(capture.released)
        self.assertTrue(tracker.closed)
        self.assertTrue(viewer.closed)

    def test_discipline_follows_mode(self):
        self.assertIs(discipline_for(Mode.VIDEO), Discipline.CONTINUITY)
        self.assertIs(discipline_for(Mode.LISTS), Discipline.FRESH)
        self.assertIs(discipline_for(Mode.IMAGE), Discipline.FRESH)


if __name__ == "__main__":
    unittest.main()
