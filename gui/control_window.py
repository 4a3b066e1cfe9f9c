import logging
import os

from PyQt6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
                             QPushButton, QLabel, QComboBox, QCheckBox, QGroupBox, QTabWidget,
                             QLineEdit, QSpinBox, QFileDialog, QFontDialog, QColorDialog, QMessageBox)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor

import qtawesome as qta

from core.background_image import IMAGE_EXTENSIONS, ImageLoadError, load_background_image
from core.settings import FONT_BOLD, FONT_ITALIC, FONT_PLAIN, Alignment, BackgroundMode, Bounds, FontSpec, Settings
from gui.area_selector import AreaSelector
from gui.countdown_overlay import css_rgba, make_font
from utils.config import config
from utils.hotkeys import HotkeyManager, RESET_HOTKEY, TOGGLE_HOTKEY
from utils.time_input import TimeInputError, parse_clock_time, parse_preset_time

logger = logging.getLogger(__name__)

# ダークテーマのスタイルシート
DARK_STYLESHEET = """
QMainWindow {
    background-color: #1e1e2e;
}
QWidget {
    background-color: #1e1e2e;
    color: #cdd6f4;
    font-family: 'Segoe UI', sans-serif;
    font-size: 10pt;
}
QTabWidget::pane {
    border: 1px solid #45475a;
    border-radius: 8px;
}
QTabBar::tab {
    background-color: #313244;
    padding: 6px 16px;
    border-top-left-radius: 6px;
    border-top-right-radius: 6px;
}
QTabBar::tab:selected {
    background-color: #45475a;
    color: #89b4fa;
}
QGroupBox {
    background-color: #313244;
    border: 1px solid #45475a;
    border-radius: 8px;
    margin-top: 12px;
    padding: 10px;
    font-weight: bold;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 10px;
    padding: 0 8px;
    color: #89b4fa;
}
QPushButton {
    background-color: #45475a;
    color: #cdd6f4;
    border: none;
    border-radius: 6px;
    padding: 8px 16px;
    min-height: 24px;
}
QPushButton:hover {
    background-color: #585b70;
}
QPushButton:pressed {
    background-color: #6c7086;
}
QPushButton:disabled {
    background-color: #313244;
    color: #6c7086;
}
QPushButton#startBtn {
    background-color: #a6e3a1;
    color: #1e1e2e;
    font-weight: bold;
}
QPushButton#stopBtn {
    background-color: #f38ba8;
    color: #1e1e2e;
    font-weight: bold;
}
QPushButton#startBtn:disabled, QPushButton#stopBtn:disabled {
    background-color: #313244;
    color: #6c7086;
}
QLineEdit, QSpinBox, QComboBox {
    background-color: #45475a;
    border: 1px solid #585b70;
    border-radius: 4px;
    padding: 4px 8px;
}
QLineEdit:hover, QSpinBox:hover, QComboBox:hover {
    border-color: #89b4fa;
}
QComboBox QAbstractItemView {
    background-color: #313244;
    border: 1px solid #45475a;
    selection-background-color: #585b70;
}
QCheckBox {
    spacing: 8px;
}
QLabel {
    background-color: transparent;
}
QLabel#timerLabel {
    font-size: 36pt;
    font-weight: bold;
    color: #89b4fa;
}
"""

IMAGE_FILTER = "Images ({})".format(" ".join(f"*.{ext}" for ext in IMAGE_EXTENSIONS))

_MODES = list(BackgroundMode)
_ALIGNMENTS = list(Alignment)


def font_spec_from_qfont(font):
    style = FONT_PLAIN
    if font.bold():
        style |= FONT_BOLD
    if font.italic():
        style |= FONT_ITALIC
    # ピクセル指定のフォントは pointSize() が -1 になる
    size = font.pointSize() if font.pointSize() > 0 else Settings.DEFAULT_FONT.size
    return FontSpec(font.family(), style, size)


class ControlWindow(QMainWindow):
    """タイマーの操作と表示設定を行うコントロールウィンドウ"""

    def __init__(self, overlay, settings, store, screen=None, hotkey_manager=None):
        super().__init__()
        self.setWindowTitle("Countdown")
        self.setMinimumWidth(500)
        self.setMinimumHeight(460)

        # スタイルシート適用
        self.setStyleSheet(DARK_STYLESHEET)

        self.overlay = overlay
        self.engine = overlay.engine
        self.settings = settings
        self.store = store
        self.target_screen = screen
        self.area_selector = None

        # オーバーレイのカウントダウン表示をミラーする
        self.overlay.set_timer_update_callback(self._update_timer_label)

        # ホットキーマネージャー
        self.hotkey_manager = hotkey_manager if hotkey_manager is not None else HotkeyManager()
        self.hotkey_manager.toggle_timer_triggered.connect(self._toggle_timer)
        self.hotkey_manager.reset_timer_triggered.connect(self._reset_timer)
        self.hotkey_manager.start_listening()

        tabs = QTabWidget()
        self.setCentralWidget(tabs)
        tabs.addTab(self._init_countdown_tab(), "Countdown")
        tabs.addTab(self._init_appearance_tab(), "Appearance")

        self._sync_from_settings()
        self._connect_appearance_signals()
        self._update_timer_label(self.engine.text)
        self._update_transport_buttons()

    def _icon_button(self, text, icon_name, color='#cdd6f4'):
        button = QPushButton(text)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.setIcon(qta.icon(icon_name, color=color))
        return button

    # ------------------------------------------------------------------
    # レイアウト
    # ------------------------------------------------------------------
    def _init_countdown_tab(self):
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setSpacing(12)
        layout.setContentsMargins(16, 16, 16, 16)

        group = QGroupBox("  Set time")
        grid = QGridLayout()

        grid.addWidget(QLabel("Set Static Time"), 0, 0)
        self.preset_field = QLineEdit()
        self.preset_field.setInputMask("99:99:99")
        self.preset_field.setText(config.preset_text)
        grid.addWidget(self.preset_field, 0, 1)
        self.preset_btn = self._icon_button("Preset Timer", 'fa5s.hourglass-half')
        self.preset_btn.clicked.connect(self._preset_timer)
        grid.addWidget(self.preset_btn, 0, 2)

        grid.addWidget(QLabel("Countdown to"), 1, 0)
        self.clock_field = QLineEdit()
        self.clock_field.setInputMask("99:99 \\h")
        self.clock_field.setText(config.clock_text)
        grid.addWidget(self.clock_field, 1, 1)
        self.countdown_btn = self._icon_button("Start Countdown", 'fa5s.clock')
        self.countdown_btn.clicked.connect(self._start_countdown_to_clock)
        grid.addWidget(self.countdown_btn, 1, 2)

        group.setLayout(grid)
        layout.addWidget(group)

        self.timer_label = QLabel("00:00:00")
        self.timer_label.setObjectName("timerLabel")
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.timer_label, 1)

        controls = QHBoxLayout()
        controls.setSpacing(12)
        self.start_btn = self._icon_button(f"  Start ({TOGGLE_HOTKEY})", 'fa5s.play', '#1e1e2e')
        self.start_btn.setObjectName("startBtn")
        self.start_btn.setMinimumHeight(48)
        self.start_btn.clicked.connect(self._start_timer)

        self.stop_btn = self._icon_button(f"  Stop ({TOGGLE_HOTKEY})", 'fa5s.stop', '#1e1e2e')
        self.stop_btn.setObjectName("stopBtn")
        self.stop_btn.setMinimumHeight(48)
        self.stop_btn.clicked.connect(self._stop_timer)

        self.reset_btn = self._icon_button(f"  Reset ({RESET_HOTKEY})", 'fa5s.undo')
        self.reset_btn.setMinimumHeight(48)
        self.reset_btn.clicked.connect(self._reset_timer)

        controls.addWidget(self.start_btn)
        controls.addWidget(self.stop_btn)
        controls.addWidget(self.reset_btn)
        layout.addLayout(controls)
        return page

    def _init_appearance_tab(self):
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setSpacing(12)
        layout.setContentsMargins(16, 16, 16, 16)

        # フォント・色
        text_group = QGroupBox("  Text")
        text_grid = QGridLayout()
        self.font_preview_label = QLabel("Font Preview")
        text_grid.addWidget(self.font_preview_label, 0, 0, 1, 2)
        self.choose_font_btn = self._icon_button("Choose Font...", 'fa5s.font')
        text_grid.addWidget(self.choose_font_btn, 0, 2)

        text_grid.addWidget(QLabel("Text Color"), 1, 0)
        self.text_color_label = QLabel()
        self.text_color_label.setFixedSize(48, 24)
        text_grid.addWidget(self.text_color_label, 1, 1)
        self.choose_text_color_btn = self._icon_button("Choose...", 'fa5s.palette')
        text_grid.addWidget(self.choose_text_color_btn, 1, 2)
        text_group.setLayout(text_grid)
        layout.addWidget(text_group)

        # 背景
        bg_group = QGroupBox("  Background")
        bg_grid = QGridLayout()
        bg_grid.addWidget(QLabel("Mode"), 0, 0)
        self.bg_mode_combo = QComboBox()
        for mode in _MODES:
            self.bg_mode_combo.addItem(mode.name)
        bg_grid.addWidget(self.bg_mode_combo, 0, 1, 1, 2)

        bg_grid.addWidget(QLabel("Color"), 1, 0)
        self.bg_color_label = QLabel()
        self.bg_color_label.setFixedSize(48, 24)
        bg_grid.addWidget(self.bg_color_label, 1, 1)
        self.choose_bg_color_btn = self._icon_button("Choose...", 'fa5s.fill-drip')
        bg_grid.addWidget(self.choose_bg_color_btn, 1, 2)

        bg_grid.addWidget(QLabel("Image"), 2, 0)
        self.image_path_label = QLabel("")
        self.image_path_label.setWordWrap(True)
        self.image_path_label.setStyleSheet("color: #a6adc8; font-size: 9pt;")
        bg_grid.addWidget(self.image_path_label, 2, 1)
        self.choose_image_btn = self._icon_button("Browse...", 'fa5s.image', '#cba6f7')
        bg_grid.addWidget(self.choose_image_btn, 2, 2)
        bg_group.setLayout(bg_grid)
        layout.addWidget(bg_group)

        # 配置
        layout_group = QGroupBox("  Layout")
        layout_grid = QGridLayout()
        layout_grid.addWidget(QLabel("Alignment"), 0, 0)
        self.alignment_combo = QComboBox()
        for alignment in _ALIGNMENTS:
            self.alignment_combo.addItem(alignment.name)
        layout_grid.addWidget(self.alignment_combo, 0, 1, 1, 2)

        layout_grid.addWidget(QLabel("Horizontal Padding"), 1, 0)
        self.margin_x_spin = QSpinBox()
        self.margin_x_spin.setRange(0, config.MAX_MARGIN)
        layout_grid.addWidget(self.margin_x_spin, 1, 1, 1, 2)

        layout_grid.addWidget(QLabel("Vertical Padding"), 2, 0)
        self.margin_y_spin = QSpinBox()
        self.margin_y_spin.setRange(0, config.MAX_MARGIN)
        layout_grid.addWidget(self.margin_y_spin, 2, 1, 1, 2)

        self.fullscreen_check = QCheckBox("Fullscreen")
        layout_grid.addWidget(self.fullscreen_check, 3, 0, 1, 2)
        self.select_region_btn = self._icon_button("Select Region...", 'fa5s.vector-square')
        layout_grid.addWidget(self.select_region_btn, 3, 2)
        layout_group.setLayout(layout_grid)
        layout.addWidget(layout_group)

        layout.addStretch()
        return page

    def _sync_from_settings(self):
        s = self.settings
        self.bg_mode_combo.setCurrentIndex(_MODES.index(s.mode))
        self.alignment_combo.setCurrentIndex(_ALIGNMENTS.index(s.alignment))
        self.margin_x_spin.setValue(s.margin_x)
        self.margin_y_spin.setValue(s.margin_y)
        self.fullscreen_check.setChecked(s.fullscreen)
        self.image_path_label.setText(s.image_path or "")
        self._update_font_preview()
        self._update_color_swatches()

    def _connect_appearance_signals(self):
        self.bg_mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        self.alignment_combo.currentIndexChanged.connect(self._on_alignment_changed)
        self.margin_x_spin.valueChanged.connect(self._on_margin_x_changed)
        self.margin_y_spin.valueChanged.connect(self._on_margin_y_changed)
        self.fullscreen_check.toggled.connect(self._on_fullscreen_toggled)
        self.choose_font_btn.clicked.connect(self._choose_font)
        self.choose_text_color_btn.clicked.connect(self._choose_text_color)
        self.choose_bg_color_btn.clicked.connect(self._choose_bg_color)
        self.choose_image_btn.clicked.connect(self._choose_image)
        self.select_region_btn.clicked.connect(self._select_region)

    def _update_font_preview(self):
        font = self.settings.font
        self.font_preview_label.setFont(make_font(font.family, font.style, config.preview_point_size))

    def _update_color_swatches(self):
        self.text_color_label.setStyleSheet(f"background-color: {css_rgba(self.settings.text_color)}; border: 1px solid #585b70;")
        self.bg_color_label.setStyleSheet(f"background-color: {css_rgba(self.settings.background_color)}; border: 1px solid #585b70;")

    def _update_appearance(self):
        self.overlay.update_appearance(self.settings)

    # ------------------------------------------------------------------
    # タイマー操作
    # ------------------------------------------------------------------
    def _start_timer(self):
        self.engine.start()
        self._update_transport_buttons()

    def _stop_timer(self):
        self.engine.stop()
        self._update_transport_buttons()

    def _reset_timer(self):
        self.engine.reset()

    def _toggle_timer(self):
        if self.engine.running:
            self._stop_timer()
        else:
            self._start_timer()

    def _update_transport_buttons(self):
        running = self.engine.running
        self.start_btn.setEnabled(not running)
        self.stop_btn.setEnabled(running)

    def _preset_timer(self):
        # 未入力の桁があると text() から空白が落ちて桁がずれる
        if not self.preset_field.hasAcceptableInput():
            logger.info("Rejected incomplete preset time: %r", self.preset_field.text())
            self._show_invalid_input()
            return
        try:
            seconds = parse_preset_time(self.preset_field.text())
        except TimeInputError as e:
            logger.info("Rejected preset time: %s", e)
            self._show_invalid_input()
            return
        self.engine.set_countdown(seconds)

    def _start_countdown_to_clock(self):
        if not self.clock_field.hasAcceptableInput():
            logger.info("Rejected incomplete clock time: %r", self.clock_field.text())
            self._show_invalid_input()
            return
        try:
            target = parse_clock_time(self.clock_field.text())
        except TimeInputError as e:
            logger.info("Rejected clock time: %s", e)
            self._show_invalid_input()
            return
        self.engine.set_countdown_to_time(target)
        self._start_timer()

    def _show_invalid_input(self):
        QMessageBox.critical(self, self.tr("Error"), self.tr("Invalid value"))

    def _update_timer_label(self, text):
        self.timer_label.setText(text)

    # ------------------------------------------------------------------
    # 表示設定
    # ------------------------------------------------------------------
    def _on_mode_changed(self, index):
        self.settings.mode = _MODES[index]
        self._update_appearance()

    def _on_alignment_changed(self, index):
        self.settings.alignment = _ALIGNMENTS[index]
        self._update_appearance()

    def _on_margin_x_changed(self, value):
        self.settings.margin_x = value
        self._update_appearance()

    def _on_margin_y_changed(self, value):
        self.settings.margin_y = value
        self._update_appearance()

    def _on_fullscreen_toggled(self, checked):
        self.settings.fullscreen = checked
        self._update_appearance()
        self.overlay.show_on(self.target_screen, checked)

    def _choose_font(self):
        current = make_font(self.settings.font.family, self.settings.font.style, self.settings.font.size)
        font, ok = QFontDialog.getFont(current, self, "Choose timer font")
        if ok:
            self.settings.font = font_spec_from_qfont(font)
            self._update_font_preview()
            self._update_appearance()

    def _choose_color(self, current, title):
        color = QColorDialog.getColor(QColor.fromRgba(current), self, title,
                                      QColorDialog.ColorDialogOption.ShowAlphaChannel)
        if color.isValid():
            return color.rgba()
        return None

    def _choose_text_color(self):
        color = self._choose_color(self.settings.text_color, "Choose Text color")
        if color is not None:
            self.settings.text_color = color
            self._update_color_swatches()
            self._update_appearance()

    def _choose_bg_color(self):
        color = self._choose_color(self.settings.background_color, "Choose Background color")
        if color is not None:
            self.settings.background_color = color
            self._update_color_swatches()
            self._update_appearance()

    def _choose_image(self):
        start_dir = os.path.dirname(self.settings.image_path) if self.settings.image_path else ""
        path, _ = QFileDialog.getOpenFileName(self, "Choose background image", start_dir, IMAGE_FILTER)
        if not path:
            return
        try:
            image = load_background_image(path)
        except ImageLoadError as e:
            logger.warning("%s", e)
            QMessageBox.critical(self, self.tr("Error"), self.tr("Error on loading file {}").format(path))
            return
        self.settings.background_image = image
        self.settings.image_path = os.path.abspath(path)
        self.image_path_label.setText(self.settings.image_path)
        self._update_appearance()

    def _select_region(self):
        self.area_selector = AreaSelector()
        self.area_selector.selection_completed.connect(self._on_region_selected)
        self.area_selector.show()

    def _on_region_selected(self, rect):
        self.settings.bounds = Bounds(*rect)
        if self.fullscreen_check.isChecked():
            # toggled シグナル経由でウィンドウ表示に切り替わる
            self.fullscreen_check.setChecked(False)
        else:
            self._update_appearance()

    def closeEvent(self, event):
        self.settings.save_to(self.store)

        # ホットキーのクリーンアップ
        self.hotkey_manager.stop_listening()
        self.overlay.engine.stop()
        self.overlay.close()
        super().closeEvent(event)
