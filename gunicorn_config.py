# Gunicorn 配置文件
# 启动：gunicorn -c gunicorn_config.py web_app:app
import multiprocessing
import os

# 服务器socket
bind = os.environ.get("LUCKY_BIND", "127.0.0.1:8000")
backlog = 2048

# Worker进程：(2 x CPU核心数) + 1
workers = int(os.environ.get("LUCKY_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
timeout = 30
keepalive = 2

# 日志
log_dir = os.environ.get("LUCKY_LOG_DIR", "logs")
os.makedirs(log_dir, exist_ok=True)

accesslog = os.path.join(log_dir, "gunicorn_access.log")
errorlog = os.path.join(log_dir, "gunicorn_error.log")
loglevel = os.environ.get("LUCKY_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(L)s'

# 进程命名
proc_name = "lucky_webapp"

daemon = False

# 每个 worker 各自加载开奖数据，不预加载
preload_app = False

graceful_timeout = 30
