"""Tests for output surfaces."""

import cv2
import numpy as np
import pytest

from espcn_live.surfaces import ArraySurface, ImageFileSurface, VideoWriterSurface, WindowSurface


class TestArraySurface:
    def test_keeps_last(self, rgba):
        surface = ArraySurface()
        assert surface.size is None
        surface.write(rgba(2, 3, rgb=(1, 2, 3)))
        surface.write(rgba(4, 5, rgb=(9, 9, 9)))
        assert surface.size == (5, 4)
        assert surface.writes == 2
        assert surface.history == []

    def test_history(self, rgba):
        surface = ArraySurface(keep_history=True)
        image = rgba(1, 1)
        surface.write(image)
        image[:] = 0
        surface.write(image)
        assert len(surface.history) == 2
        assert surface.history[0][0, 0, 0] == 255


class TestImageFileSurface:
    def test_writes_png_with_alpha(self, tmp_path, rgba):
        path = tmp_path / "out.png"
        with ImageFileSurface(path) as surface:
            surface.write(rgba(3, 4, rgb=(10, 20, 30), alpha=128))
        bgra = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        assert bgra.shape == (3, 4, 4)
        assert bgra[0, 0].tolist() == [30, 20, 10, 128]

    def test_numbered_frames(self, tmp_path, rgba):
        surface = ImageFileSurface(tmp_path / "frames" / "sr_{frame:03d}.png")
        surface.write(rgba(2, 2))
        surface.write(rgba(2, 2))
        assert sorted(p.name for p in (tmp_path / "frames").iterdir()) == [
            "sr_000.png", "sr_001.png",
        ]


class TestVideoWriterSurface:
    def test_writes_frames(self, tmp_path, rgba):
        path = tmp_path / "out.avi"
        surface = VideoWriterSurface(path, fps=10.0, fourcc="MJPG")
        try:
            surface.write(rgba(16, 16))
        except Exception:
            pytest.skip("OpenCV build cannot write MJPG")
        surface.write(rgba(8, 8))  # resized to the first frame's size
        surface.close()

        assert surface.frames_written == 2
        assert surface.size == (16, 16)
        cap = cv2.VideoCapture(str(path))
        assert int(cap.get(cv2.CAP_PROP_FRAME_COUNT)) == 2
        cap.release()

    def test_close_without_frames(self, tmp_path):
        surface = VideoWriterSurface(tmp_path / "never.mp4")
        surface.close()
        assert not (tmp_path / "never.mp4").exists()


class TestWindowSurface:
    def test_pointer_callback(self):
        moves = []
        surface = WindowSurface("test", on_pointer=lambda x, y: moves.append((x, y)))
        surface._mouse_callback(cv2.EVENT_MOUSEMOVE, 5, 7, 0, None)
        surface._mouse_callback(cv2.EVENT_LBUTTONDOWN, 1, 1, 0, None)
        assert moves == [(5, 7)]

    def test_close_before_open_is_noop(self):
        surface = WindowSurface("test")
        surface.close()
        assert surface.size is None
        assert not surface.closed_by_user


@pytest.fixture
def highgui(monkeypatch):
    """Replace HighGUI calls with recorders; returns the waitKey delays."""
    waits = []

    def wait_key(delay):
        waits.append(delay)
        return -1

    monkeypatch.setattr(cv2, "namedWindow", lambda *a: None)
    monkeypatch.setattr(cv2, "imshow", lambda *a: None)
    monkeypatch.setattr(cv2, "destroyWindow", lambda *a: None)
    monkeypatch.setattr(cv2, "waitKey", wait_key)
    return waits


class TestWindowHold:
    def test_hold_waits_for_key_on_close(self, highgui, rgba):
        surface = WindowSurface("test", hold=True)
        surface.write(rgba(2, 2))
        surface.close()
        assert highgui == [1, 0]

    def test_no_hold_closes_immediately(self, highgui, rgba):
        surface = WindowSurface("test")
        surface.write(rgba(2, 2))
        surface.close()
        assert highgui == [1]

    def test_hold_skipped_when_nothing_shown(self, highgui):
        surface = WindowSurface("test", hold=True)
        surface.close()
        assert highgui == []
