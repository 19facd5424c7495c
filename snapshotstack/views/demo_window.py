# snapshotstack/views/demo_window.py
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from PySide6.QtCore import Qt, Slot, QSize
from PySide6.QtGui import QImage
from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QCheckBox,
                               QPushButton, QButtonGroup, QLabel)

from snapshotstack import config
from snapshotstack.services.image_source import load_image, sample_images
from snapshotstack.views.snapshot_stack_view import SnapshotStackView
from snapshotstack.widgets.frame_size_field import FrameSizeField

logger = logging.getLogger(__name__)


class DemoWindow(QMainWindow):
    """One screen: the stack view and the controls that drive its properties."""

    def __init__(self, image_paths: Optional[Iterable[Path]] = None, display_as_stack: bool = True):
        super().__init__()
        self.setWindowTitle("Snapshot Stack View")
        self.resize(560, 680)

        self.images: Dict[str, QImage] = sample_images()
        file_labels = []
        for path in image_paths or ():
            image = load_image(path)
            if image is not None:
                label = self._unique_label(Path(path).stem)
                self.images[label] = image
                file_labels.append(label)

        self.setup_ui()
        self.display_stack_switch.setChecked(display_as_stack)
        self.on_display_stack_changed(display_as_stack)
        # files given on the command line win over the built-in samples
        self.select_image(list(self.images).index(file_labels[0]) if file_labels else 0)
        self.on_frame_size_changed(self.size_field.frameSize())

    ### --- GUI Setup --- ###
    def setup_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)

        self.stage = QWidget()
        self.stage.setObjectName("stage")
        self.stage.setStyleSheet(f"#stage {{ background: {config.DEMO_BACKGROUND}; }}")
        stage_layout = QVBoxLayout(self.stage)
        self.snapshot_view = SnapshotStackView(self.stage)
        stage_layout.addWidget(self.snapshot_view, 0, Qt.AlignCenter)
        layout.addWidget(self.stage, 1)

        self.display_stack_switch = QCheckBox("Display as stack")
        self.display_stack_switch.toggled.connect(self.on_display_stack_changed)
        layout.addWidget(self.display_stack_switch)

        self.image_selection = QButtonGroup(self)
        self.image_selection.setExclusive(True)
        segments = QHBoxLayout()
        segments.setSpacing(0)
        self.image_buttons: List[QPushButton] = []
        for i, label in enumerate(self.images):
            btn = QPushButton(label)
            btn.setCheckable(True)
            self.image_selection.addButton(btn, i)
            segments.addWidget(btn)
            self.image_buttons.append(btn)
        self.image_selection.idClicked.connect(self.on_image_selection_changed)
        layout.addLayout(segments)

        size_row = QHBoxLayout()
        size_row.addWidget(QLabel("Frame"))
        self.size_field = FrameSizeField(self)
        self.size_field.sizeChanged.connect(self.on_frame_size_changed)
        size_row.addWidget(self.size_field, 1)
        layout.addLayout(size_row)

        frame_row = QHBoxLayout()
        frame_row.addWidget(QLabel("Image frame"))
        frame_row.addStretch(1)
        self.image_frame_size = QLabel()
        self.image_frame_size.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        frame_row.addWidget(self.image_frame_size)
        layout.addLayout(frame_row)
        for changed in (self.snapshot_view.displayAsStackChanged, self.snapshot_view.imageChanged,
                        self.snapshot_view.strokeWidthChanged, self.snapshot_view.stackAnglesChanged):
            changed.connect(self.update_image_frame_label)

        self.setCentralWidget(central)

    # ---- Actions ----
    def _unique_label(self, stem: str) -> str:
        label, n = stem, 1
        while label in self.images:
            n += 1
            label = f"{stem} ({n})"
        return label

    def select_image(self, index: int):
        btn = self.image_selection.button(index)
        if btn is None:
            return
        btn.setChecked(True)
        self.on_image_selection_changed(index)

    @Slot(bool)
    def on_display_stack_changed(self, checked: bool):
        self.snapshot_view.displayAsStack = checked

    @Slot(int)
    def on_image_selection_changed(self, index: int):
        label = list(self.images)[index]
        self.snapshot_view.image = self.images[label]
        logger.debug("Selected image %s", label)

    @Slot(QSize)
    def on_frame_size_changed(self, size: QSize):
        self.snapshot_view.setFixedSize(size)
        self.update_image_frame_label()

    @Slot()
    def update_image_frame_label(self):
        frame = self.snapshot_view.imageFrame
        self.image_frame_size.setText(f"{round(frame.width())} x {round(frame.height())}")
