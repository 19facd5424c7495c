from PySide6.QtCore import Qt, Signal, Slot, Property, QSize
from PySide6.QtWidgets import QWidget, QHBoxLayout, QSlider, QLabel, QSizePolicy

from snapshotstack import config


class FrameSizeField(QWidget):
    """
    Frame size control: slider in percent of a maximum size + "W x H" label.
    Emits sizeChanged(QSize) with the resulting frame size.
    """
    percentChanged = Signal(int)
    sizeChanged = Signal(QSize)

    def __init__(self, parent=None, max_size=QSize(*config.FRAME_MAX_SIZE),
                 minimum=config.FRAME_MIN_PERCENT, maximum=config.FRAME_MAX_PERCENT):
        super().__init__(parent)
        self._max_size = QSize(max_size)
        self._block = False
        self._percent = maximum

        self.slider = QSlider(Qt.Horizontal, self)
        self.slider.setRange(minimum, maximum)
        self.slider.setSingleStep(1)
        self.slider.setPageStep(10)

        self.label = QLabel(self)
        self.label.setMinimumWidth(80)
        self.label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.label.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

        lay = QHBoxLayout(self); lay.setContentsMargins(0, 0, 0, 0); lay.setSpacing(6)
        lay.addWidget(self.slider, 1)
        lay.addWidget(self.label, 0)

        self.slider.valueChanged.connect(self._on_slider_changed)

        self.setPercent(maximum, emit_signal=False)

    # ---- API
    def percent(self) -> int:
        return self._percent

    @Slot(int)
    def setPercent(self, value: int, emit_signal: bool = True):
        """Clamps to the slider range."""
        val = max(self.slider.minimum(), min(self.slider.maximum(), int(value)))
        self._percent = val
        self._sync_views(val)
        if emit_signal:
            self.percentChanged.emit(val)
            self.sizeChanged.emit(self.frameSize())

    percentProp = Property(int, fget=percent, fset=setPercent, notify=percentChanged)

    def frameSize(self) -> QSize:
        return QSize(
            max(1, round(self._max_size.width() * self._percent / 100)),
            max(1, round(self._max_size.height() * self._percent / 100)),
        )

    # ---- internals
    def _sync_views(self, val: int):
        self._block = True
        try:
            self.slider.setValue(val)
            size = self.frameSize()
            self.label.setText(f"{size.width()} x {size.height()}")
        finally:
            self._block = False

    @Slot(int)
    def _on_slider_changed(self, v: int):
        if self._block: return
        self.setPercent(v)
