import logging

from PyQt6.QtWidgets import QWidget, QApplication
from PyQt6.QtCore import Qt, QRect, QPoint, pyqtSignal
from PyQt6.QtGui import QColor, QPen, QPainter

logger = logging.getLogger(__name__)

# これより小さい範囲は誤操作とみなす
MIN_REGION_SIZE = 10


class AreaSelector(QWidget):
    """ドラッグでオーバーレイのウィンドウ表示範囲を選択する"""

    selection_completed = pyqtSignal(tuple)  # (x, y, w, h)
    selection_canceled = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.setWindowFlags(Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint | Qt.WindowType.Tool)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)

        # マルチモニタ対応: 全仮想デスクトップをカバーするように設定
        screen_geometry = QApplication.primaryScreen().virtualGeometry()
        self.setGeometry(screen_geometry)

        self.setCursor(Qt.CursorShape.CrossCursor)

        self.origin = QPoint()
        self.current = QPoint()
        self.is_selecting = False

        # 半透明の背景色（暗くする）
        self.overlay_color = QColor(0, 0, 0, 100)
        self.border_color = QColor(255, 0, 0, 200)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        # 全体を少し暗く塗る
        painter.fillRect(self.rect(), self.overlay_color)

        if self.is_selecting and not self.origin.isNull():
            # 選択範囲をクリア（透明に）して、そこだけ明るく見せる効果
            selected_rect = QRect(self.origin, self.current).normalized()
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
            painter.fillRect(selected_rect, Qt.GlobalColor.transparent)

            # 枠線を描画
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)
            painter.setPen(QPen(self.border_color, 2))
            painter.drawRect(selected_rect)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.origin = event.pos()
            self.current = event.pos()
            self.is_selecting = True
            self.update()

    def mouseMoveEvent(self, event):
        if self.is_selecting:
            self.current = event.pos()
            self.update()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self.is_selecting:
            self.is_selecting = False
            rect = QRect(self.origin, event.pos()).normalized()

            if rect.width() > MIN_REGION_SIZE and rect.height() > MIN_REGION_SIZE:
                # ウィンドウ座標は論理座標のまま扱う (Local -> Global のみ)
                top_left = self.mapToGlobal(rect.topLeft())
                region = (top_left.x(), top_left.y(), rect.width(), rect.height())
                logger.debug("Region selected: %s", region)
                self.selection_completed.emit(region)
                self.close()
            else:
                self.origin = QPoint()
                self.update()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            self.selection_canceled.emit()
            self.close()
