# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .models import User
from .session import Base, Database, create_engine_from_config

__all__ = ["Base", "Database", "User", "create_engine_from_config"]
