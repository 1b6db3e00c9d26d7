# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from sessionauth.app import create_app
from sessionauth.shared.config import load_config


def main() -> None:
    config = load_config()
    app = create_app(config)
    app.run(host=config.host, port=config.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
