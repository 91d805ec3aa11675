import logging
import os
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from symhl.settings_models import SettingsPaths
from symhl.settings_store import JsonSettingsStore
from symhl.ui.main_window import SymbolViewerWindow

APP_DIR_ENV = "SYMHL_APP_DIR"


def _default_app_dir() -> Path:
    override = str(os.environ.get(APP_DIR_ENV, "") or "").strip()
    if override:
        return Path(override).expanduser()
    config_home = str(os.environ.get("XDG_CONFIG_HOME", "") or "").strip()
    base = Path(config_home).expanduser() if config_home else Path.home() / ".config"
    return base / "symhl"


def _split_startup_args(argv: list[str]) -> tuple[list[str], bool]:
    files: list[str] = []
    verbose = False
    for arg in argv:
        if arg in {"-v", "--verbose"}:
            verbose = True
            continue
        files.append(arg)
    return files, verbose


def main() -> int:
    file_args, verbose = _split_startup_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = JsonSettingsStore.for_paths(SettingsPaths(app_dir=_default_app_dir()))
    store.load()

    app = QApplication([sys.argv[0]])
    app.setStyle("Fusion")
    app.setApplicationName(SymbolViewerWindow.APP_NAME)
    window = SymbolViewerWindow(store)
    for file_path in file_args:
        window.open_file(file_path)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
