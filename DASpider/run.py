import logging
import sys

from scrapy.crawler import CrawlerProcess
from scrapy.settings import Settings

from DASpider import settings as project_settings
from DASpider.exceptions import StorageError, TransportError
from DASpider.spiders.mount_gambier_spider import MountGambierSpider

logger = logging.getLogger(__name__)


def get_settings():
    settings = Settings()
    settings.setmodule(project_settings, priority='project')
    return settings


def run(settings=None, **spider_kwargs) -> int:
    """
    跑一次爬虫, 返回新入库的记录数
    spider_kwargs 作为爬虫参数传入 (days, main_url, search_url 等)
    """
    process = CrawlerProcess(settings or get_settings())
    crawler = process.create_crawler(MountGambierSpider)
    process.crawl(crawler, **spider_kwargs)
    process.start()

    stats = crawler.stats
    finish_reason = stats.get_value('finish_reason')
    if finish_reason == 'transport_error':
        raise TransportError(stats.get_value('transport_error_url'), stats.get_value('transport_error'))
    if finish_reason == 'storage_error':
        raise StorageError(stats.get_value('storage_error'))
    return stats.get_value('applications/inserted', 0)


def main():
    try:
        inserted = run()
    except (TransportError, StorageError) as e:
        logger.error(f'run aborted: {e}')
        return 1
    logger.info(f'{inserted} new application(s) stored')
    return 0


if __name__ == '__main__':
    sys.exit(main())
