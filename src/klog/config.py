import os

from libb import Setting

Setting.unlock()

# Redis sink defaults, used by Logger.set_redis_backend
redis = Setting()
redis.password = os.getenv('CONFIG_KLOG_REDIS_PASSWORD', '')
redis.db = int(os.getenv('CONFIG_KLOG_REDIS_DB', 0))
redis.timeout = float(os.getenv('CONFIG_KLOG_REDIS_TIMEOUT', 0)) or None

Setting.lock()
