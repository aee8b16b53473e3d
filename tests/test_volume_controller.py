import pytest
from PyQt5.QtCore import QObject

from core import ChangeKind
from data import MoleculeModel
from rendering import ActiveObjects, VolumeController, VolumeSurface


def _subscribers(surface) -> int:
    return surface.receivers(surface.volume_data_updated)


class _Session:
    """Model with one field, two volume views and a controller with a fake editor."""

    def __init__(self, make_plotter, make_editor, field, with_field=True, controller_first=True):
        self.model = MoleculeModel("test")
        if with_field:
            self.model.add_cube(field)
        self.active = ActiveObjects()
        self.factory_calls = 0
        self._make_editor = make_editor
        self.controller = VolumeController(self.active, editor_factory=self._factory, bins=16)
        if controller_first:
            self.controller.attach_model(self.model)

        self.plotter_a, self.plotter_b = make_plotter(), make_plotter()
        self.a = VolumeSurface(self.plotter_a, name="A")
        self.b = VolumeSurface(self.plotter_b, name="B")
        self.a.set_model(self.model)
        self.b.set_model(self.model)
        if not controller_first:
            self.controller.attach_model(self.model)

    def _factory(self):
        self.factory_calls += 1
        return self._make_editor()


@pytest.fixture
def session(make_plotter, make_editor, make_field):
    return _Session(make_plotter, make_editor, make_field())


@pytest.fixture
def empty_session(make_plotter, make_editor, make_field):
    return _Session(make_plotter, make_editor, make_field(), with_field=False)


def test_switching_a_b_a_leaves_one_subscription_on_a(session):
    session.active.set_active_widget(session.a)
    session.active.set_active_widget(session.b)
    session.active.set_active_widget(session.a)

    assert session.controller.binding.is_bound_to(session.a)
    assert _subscribers(session.a) == 1
    assert _subscribers(session.b) == 0


def test_repeated_focus_notifications_are_idempotent(session):
    session.active.set_active_widget(session.a)
    handle = session.controller.binding.handle
    session.controller.on_active_surface_changed()
    session.controller.on_active_surface_changed()

    assert _subscribers(session.a) == 1
    assert session.controller.binding.handle == handle


def test_one_redraw_per_editor_change(session):
    session.active.set_active_widget(session.a)
    editor = session.controller.open_editor()
    session.controller.on_active_surface_changed()
    session.controller.open_editor()

    editor.opacity_changed.emit()
    assert session.plotter_a.render_calls == 1
    editor.color_map_updated.emit()
    editor.render_needed.emit()
    assert session.plotter_a.render_calls == 3
    assert session.plotter_b.render_calls == 0


def test_fields_removed_to_zero_disables_and_skips_histogram(session):
    session.active.set_active_widget(session.a)
    editor = session.controller.open_editor()
    pushed = len(editor.histograms)
    enabled = []
    session.controller.actions_enabled_changed.connect(enabled.append)

    session.model.remove_cube(0)

    assert not session.controller.is_bound
    assert not session.controller.actions_enabled
    assert enabled == [False]
    assert len(editor.histograms) == pushed
    assert _subscribers(session.a) == 0


def test_empty_model_is_disabled_even_with_volume_surface(empty_session):
    empty_session.active.set_active_widget(empty_session.a)
    assert not empty_session.controller.actions_enabled
    assert not empty_session.controller.is_bound
    assert _subscribers(empty_session.a) == 0


def test_fields_added_binds_and_refreshes(empty_session, make_field):
    empty_session.active.set_active_widget(empty_session.a)
    editor = empty_session.controller.open_editor()
    assert editor.histograms == []

    field = make_field()
    empty_session.model.add_cube(field)

    assert empty_session.controller.is_bound
    assert empty_session.controller.actions_enabled
    assert editor.histograms[-1].total == field.size
    assert len(editor.histograms[-1]) == 16


def test_non_volume_widget_unbinds(session):
    session.active.set_active_widget(session.a)
    info_page = QObject()
    session.active.set_active_widget(info_page)

    assert not session.controller.is_bound
    assert not session.controller.actions_enabled
    assert _subscribers(session.a) == 0


def test_open_editor_builds_once_and_refreshes_every_time(session):
    session.active.set_active_widget(session.a)
    first = session.controller.open_editor()
    second = session.controller.open_editor()

    assert first is second
    assert session.factory_calls == 1
    assert first.show_calls == 2
    assert len(first.histograms) == 2
    color_ramp, opacity_curve = first.transfer_functions[-1]
    assert color_ramp is session.a.color_ramp()
    assert opacity_curve is session.a.opacity_curve()


def test_open_editor_without_factory_returns_none():
    controller = VolumeController(ActiveObjects())
    assert controller.open_editor() is None
    assert controller.editor is None


def test_redraw_is_noop_while_unbound(session):
    assert session.controller.request_redraw() is False
    assert session.plotter_a.render_calls == 0


def test_volume_data_update_refreshes_histogram(session, make_field):
    session.active.set_active_widget(session.a)
    editor = session.controller.open_editor()
    pushed = len(editor.histograms)
    updates = []
    session.controller.histogram_updated.connect(updates.append)

    session.model.replace_cube(0, make_field(scale=4.0))

    assert len(editor.histograms) == pushed + 1
    assert updates == [editor.histograms[-1]]
    assert editor.histograms[-1].value_range == (-4.0, 4.0)


def test_atom_changes_are_ignored(session):
    session.active.set_active_widget(session.a)
    editor = session.controller.open_editor()
    pushed = len(editor.histograms)

    session.controller.on_model_changed(ChangeKind.ATOMS)
    session.model.set_atoms([1], [[0.0, 0.0, 0.0]])

    assert len(editor.histograms) == pushed
    assert session.controller.is_bound


def test_switching_surface_pushes_new_transfer_function(session):
    session.active.set_active_widget(session.a)
    editor = session.controller.open_editor()
    session.active.set_active_widget(session.b)

    color_ramp, _ = editor.transfer_functions[-1]
    assert color_ramp is session.b.color_ramp()


def test_attach_model_swaps_observed_model(session, make_field):
    session.active.set_active_widget(session.a)
    assert session.controller.actions_enabled

    other = MoleculeModel("empty")
    session.controller.attach_model(other)
    assert session.controller.model is other
    assert not session.controller.actions_enabled

    session.model.add_cube(make_field())
    assert not session.controller.actions_enabled


def test_shutdown_releases_everything(session):
    session.active.set_active_widget(session.a)
    session.controller.shutdown()

    assert _subscribers(session.a) == 0
    assert session.controller.model is None
    assert not session.controller.actions_enabled


@pytest.mark.parametrize("controller_first", [True, False])
def test_adding_second_cube_pushes_one_histogram(make_plotter, make_editor, make_field, controller_first):
    first = make_field()
    s = _Session(make_plotter, make_editor, first, controller_first=controller_first)
    s.active.set_active_widget(s.a)
    editor = s.controller.open_editor()
    pushed = len(editor.histograms)

    s.model.add_cube(make_field(scale=9.0, name="second"))

    assert len(editor.histograms) == pushed + 1
    assert editor.histograms[-1].total == first.size
    assert editor.histograms[-1].value_range == (-1.0, 1.0)
    assert s.controller.is_bound


@pytest.mark.parametrize("controller_first", [True, False])
def test_removing_first_of_two_cubes_pushes_one_current_histogram(make_plotter, make_editor, make_field,
                                                                 controller_first):
    s = _Session(make_plotter, make_editor, make_field(), controller_first=controller_first)
    s.model.add_cube(make_field(scale=4.0, name="second"))
    s.active.set_active_widget(s.a)
    editor = s.controller.open_editor()
    pushed = len(editor.histograms)

    s.model.remove_cube(0)

    assert len(editor.histograms) == pushed + 1
    assert editor.histograms[-1].value_range == (-4.0, 4.0)
    assert s.a.data_range == (-4.0, 4.0)
    assert _subscribers(s.a) == 1
