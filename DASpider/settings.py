BOT_NAME = "DASpider"

SPIDER_MODULES = ["DASpider.spiders"]
NEWSPIDER_MODULE = "DASpider.spiders"

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36'

ROBOTSTXT_OBEY = False

# 查询依赖上一个请求拿到的 session, 请求必须按顺序一个一个发
CONCURRENT_REQUESTS = 1
COOKIES_ENABLED = True
RETRY_ENABLED = False
DOWNLOAD_TIMEOUT = 60

ITEM_PIPELINES = {
    "DASpider.pipelines.SqlitePipeline": 300,
}
SQLITE_DATABASE = "data.sqlite"

LOG_LEVEL = "INFO"

TWISTED_REACTOR = "twisted.internet.asyncioreactor.AsyncioSelectorReactor"
FEED_EXPORT_ENCODING = "utf-8"
