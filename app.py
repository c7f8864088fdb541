import sys
from PyQt5.QtWidgets import QApplication
from PyQt5.QtGui import QFont

from config import settings
from ui.main_window import MainWindow
from utils.logging import setup_logging

if __name__ == "__main__":
    setup_logging(level=settings.log_level)

    app = QApplication(sys.argv)

    # Set global font
    font = QFont("Arial", 10)
    app.setFont(font)

    window = MainWindow(settings)
    window.show()

    sys.exit(app.exec_())
