import pytest
from PyQt5.QtCore import QCoreApplication, QObject, pyqtSignal

from coincidence.delegate import EventRecorder


class FakeTimer(QObject):
    """Stand-in for QTimer that only fires when told to."""
    timeout = pyqtSignal()

    instances = []

    def __init__(self, parent=None):
        super().__init__(parent)
        self.interval = None
        self.active = False
        FakeTimer.instances.append(self)

    def start(self, interval):
        self.interval = interval
        self.active = True

    def stop(self):
        self.active = False

    def fire(self):
        """Deliver one timeout, even if stopped (simulates an already-queued event)."""
        self.timeout.emit()


@pytest.fixture
def timers():
    FakeTimer.instances = []
    yield FakeTimer.instances
    FakeTimer.instances = []


@pytest.fixture
def timer_factory(timers):
    return FakeTimer


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
