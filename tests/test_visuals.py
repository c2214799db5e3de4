import unittest

import numpy as np

from music_visualizer.analysis import SpectrumFrame
from music_visualizer.config import VisualSettings
from music_visualizer.ui.button import Rect
from music_visualizer.visuals import Renderer

AREA = Rect.from_corners(300.0, 0.0, 1300.0, 700.0)


def _frame(levels, rms: float = 0.1, beat: bool = False) -> SpectrumFrame:
    return SpectrumFrame(bars=np.asarray(levels, dtype=np.float32), rms=rms, beat=beat, energy=rms * rms)


class TestRenderer(unittest.TestCase):
    def test_bars_are_bottom_aligned_and_scaled(self) -> None:
        visual = Renderer(VisualSettings()).render(_frame([0.0, 0.5, 1.0]), AREA)

        self.assertEqual(len(visual.bars), 3)
        heights = [bar.rect.h for bar in visual.bars]
        self.assertEqual(heights[0], 1.0)
        self.assertAlmostEqual(heights[1], 0.5 * 0.9 * 700.0)
        self.assertAlmostEqual(heights[2], 0.9 * 700.0)
        for bar in visual.bars:
            self.assertAlmostEqual(bar.rect.bottom, AREA.bottom)
            self.assertGreaterEqual(bar.rect.left, AREA.left)
            self.assertLessEqual(bar.rect.right, AREA.right)

    def test_louder_bars_are_brighter(self) -> None:
        visual = Renderer(VisualSettings()).render(_frame([0.1, 0.9]), AREA)
        dim, bright = visual.bars
        self.assertGreater(max(bright.fill), max(dim.fill))

    def test_beat_enlarges_pulse(self) -> None:
        calm = Renderer(VisualSettings()).render(_frame([0.5], beat=False), AREA)
        kick = Renderer(VisualSettings()).render(_frame([0.5], beat=True), AREA)
        self.assertGreater(kick.pulse.radius, calm.pulse.radius)

    def test_beat_boost_decays(self) -> None:
        renderer = Renderer(VisualSettings())
        first = renderer.render(_frame([0.5], beat=True), AREA).pulse.radius
        later = renderer.render(_frame([0.5], beat=False), AREA).pulse.radius
        self.assertLess(later, first)

    def test_shapes_start_with_background(self) -> None:
        visual = Renderer(VisualSettings()).render(_frame([0.2, 0.4]), AREA)
        shapes = visual.shapes()
        self.assertIs(shapes[0], visual.background)
        self.assertEqual(len(shapes), 4)

    def test_empty_frame_draws_no_bars(self) -> None:
        visual = Renderer(VisualSettings()).render(_frame([]), AREA)
        self.assertEqual(visual.bars, [])


if __name__ == "__main__":
    unittest.main()
