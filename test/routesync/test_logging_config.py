# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import logging.handlers

import pytest

from routesync._logging_config import CORE_LOG_FILE, init_basic_logging


class TestLoggingConfig:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in list(root.handlers):
            if handler not in handlers:
                handler.close()
                root.removeHandler(handler)
        root.setLevel(level)

    @staticmethod
    def _own_handlers():
        return [handler for handler in logging.getLogger().handlers if getattr(handler, "_routesync_handler", False)]

    def test_reinitialization_does_not_stack_handlers(self):
        init_basic_logging()
        init_basic_logging()
        assert len(self._own_handlers()) == 1

    def test_level_by_name(self):
        logger = init_basic_logging(None, True, "debug")
        assert logger.level == logging.DEBUG
        assert logging.getLogger("botocore").level == logging.INFO

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            init_basic_logging(None, True, "chatty")

    def test_rotating_file_handler(self, tmp_path):
        log_dir = str(tmp_path / "logs")
        init_basic_logging(log_dir, False)

        handlers = self._own_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
        assert (tmp_path / "logs" / CORE_LOG_FILE).exists()
