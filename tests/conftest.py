import numpy as np
import pytest
from PyQt5.QtCore import QObject, pyqtSignal

from core import ScalarField


class FakeProperty:
    def __init__(self):
        self.color = None
        self.scalar_opacity = None

    def SetColor(self, ctf):
        self.color = ctf

    def SetScalarOpacity(self, otf):
        self.scalar_opacity = otf


class FakeActor:
    def __init__(self, grid):
        self.grid = grid
        self.prop = FakeProperty()

    def GetProperty(self):
        return self.prop


class FakePlotter:
    """Records the calls VolumeSurface makes on a PyVista plotter."""

    def __init__(self):
        self.actors = []
        self.removed = []
        self.add_volume_kwargs = []
        self.render_calls = 0
        self.camera_resets = 0

    def add_volume(self, grid, **kwargs):
        actor = FakeActor(grid)
        self.actors.append(actor)
        self.add_volume_kwargs.append(kwargs)
        return actor

    def remove_actor(self, actor, render=True):
        self.removed.append(actor)

    def render(self):
        self.render_calls += 1

    def reset_camera(self):
        self.camera_resets += 1


class FakeEditor(QObject):
    color_map_updated = pyqtSignal()
    opacity_changed = pyqtSignal()
    render_needed = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.histograms = []
        self.transfer_functions = []
        self.show_calls = 0

    def set_histogram(self, histogram):
        self.histograms.append(histogram)

    def set_transfer_function(self, color_ramp, opacity_curve):
        self.transfer_functions.append((color_ramp, opacity_curve))

    def show(self):
        self.show_calls += 1


@pytest.fixture
def make_plotter():
    return FakePlotter


@pytest.fixture
def make_editor():
    return FakeEditor


@pytest.fixture
def make_field():
    def _make(dims=(3, 4, 5), scale=1.0, name="rho"):
        n = dims[0] * dims[1] * dims[2]
        values = np.linspace(-1.0, 1.0, n) * scale if n else np.zeros(0)
        return ScalarField(dimensions=dims, origin=(0.0, 0.0, 0.0),
                           spacing=(0.5, 0.5, 0.5), values=values, name=name)
    return _make
