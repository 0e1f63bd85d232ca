"""Allow running PaceLab as a module: python -m pacelab."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import PaceLabApp
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging(verbose="--verbose" in sys.argv)

    app = QApplication(sys.argv)
    app.setApplicationName("PaceLab")
    app.setOrganizationName("PaceLab")

    # Window icon (generated placeholder: accent purple circle)
    from PyQt6.QtGui import QIcon, QPixmap, QPainter, QColor
    icon = QPixmap(256, 256)
    icon.fill(QColor(0, 0, 0, 0))
    p = QPainter(icon)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor("#CBA6F7"))
    p.setPen(QColor("#CBA6F7").darker(120))
    p.drawEllipse(16, 16, 224, 224)
    p.end()
    app.setWindowIcon(QIcon(icon))

    window = PaceLabApp()
    window.show()
    logger.info("PaceLab ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
