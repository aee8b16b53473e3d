import gc

from PyQt5.QtCore import QObject

from rendering import ActiveObjects


def test_emits_only_on_change():
    active = ActiveObjects()
    seen = []
    active.active_widget_changed.connect(seen.append)
    widget = QObject()

    active.set_active_widget(widget)
    active.set_active_widget(widget)
    active.set_active_widget(None)

    assert seen == [widget, None]
    assert active.active_widget() is None


def test_does_not_keep_widget_alive():
    active = ActiveObjects()
    widget = QObject()
    active.set_active_widget(widget)

    del widget
    gc.collect()

    assert active.active_widget() is None
