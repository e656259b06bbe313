import logging

LOG_FORMAT = "[%(sim_time)s] %(levelname)s %(short_name)s: %(message)s"


class SimTimeFilter(logging.Filter):
    """ログレコードにシミュレーション時刻と短縮ロガー名を付与するフィルター。"""

    def filter(self, record: logging.LogRecord) -> bool:
        # extra={"sim_time": t} で渡された時刻を小数点3桁で整形
        sim_time = getattr(record, "sim_time", None)
        if isinstance(sim_time, (int, float)):
            record.sim_time = f"{sim_time:.3f}s"
        elif sim_time is None:
            record.sim_time = "-"

        # 例: lidar_car_sim.sensor -> sensor
        record.short_name = record.name.split(".")[-1]

        return True


def configure_logging(level: int | str = logging.INFO) -> logging.Handler:
    """Attach a stream handler with SimTimeFilter to the package logger.

    Args:
        level: Logging level

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler()
    handler.addFilter(SimTimeFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("lidar_car_sim")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
