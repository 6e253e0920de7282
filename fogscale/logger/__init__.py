"""Logging sinks used by fogscale. Import `ScaleLogger` from `fogscale.logger.scale_logger`."""
