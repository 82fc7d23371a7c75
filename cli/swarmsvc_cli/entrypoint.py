from __future__ import annotations

from .main import app


def main() -> None:
    app(prog_name="swarmsvc")


if __name__ == "__main__":
    main()
