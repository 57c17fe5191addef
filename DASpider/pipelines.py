import enum
import logging
import sqlite3

logger = logging.getLogger(__name__)


class InsertOutcome(enum.Enum):
    INSERTED = 'inserted'
    ALREADY_PRESENT = 'already_present'


class SqlitePipeline:
    """
    按 item.Meta 描述的表结构写入 sqlite, 主键已存在的记录不会被覆盖
    """

    def __init__(self, database='data.sqlite', stats=None, crawler=None):
        self.database = database
        self.stats = stats
        self.crawler = crawler
        self.connection = None
        self._schemas = set()
        self._closing = False

    @classmethod
    def from_crawler(cls, crawler):
        return cls(
            database=crawler.settings.get('SQLITE_DATABASE', 'data.sqlite'),
            stats=crawler.stats,
            crawler=crawler,
        )

    def open_spider(self, spider=None):
        self.connection = sqlite3.connect(self.database)
        if spider is None and self.crawler is not None:
            spider = self.crawler.spider
        # 即使这次没有抓到数据也要把表建好
        for item_class in getattr(spider, 'item_classes', ()):
            self.ensure_schema(item_class.Meta)

    def close_spider(self, spider=None):
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def ensure_schema(self, meta):
        """
        建表, 可重复调用
        """
        primary_key = meta.unique_fields[0]
        columns = ', '.join(
            f'[{column}] text primary key' if column == primary_key else f'[{column}] text'
            for column in meta.columns)
        self.connection.execute(f'create table if not exists [{meta.table}] ({columns})')
        self.connection.commit()
        self._schemas.add(meta.table)

    def insert_if_absent(self, item) -> InsertOutcome:
        meta = item.Meta
        if meta.table not in self._schemas:
            self.ensure_schema(meta)
        placeholders = ', '.join('?' for _ in meta.columns)
        cursor = self.connection.execute(
            f'insert or ignore into [{meta.table}] values ({placeholders})',
            [item.get(column) for column in meta.columns])
        self.connection.commit()
        if cursor.rowcount > 0:
            return InsertOutcome.INSERTED
        return InsertOutcome.ALREADY_PRESENT

    def process_item(self, item, spider=None):
        try:
            outcome = self.insert_if_absent(item)
        except sqlite3.Error as e:
            logger.error(f'failed to store application "{item.get("council_reference")}": {e}')
            self.abort(spider, str(e))
            raise
        if outcome is InsertOutcome.INSERTED:
            logger.info(f'Inserted: application "{item["council_reference"]}" with address '
                        f'"{item["address"]}" and reason "{item["description"]}" into the database.')
        else:
            logger.info(f'Skipped: application "{item["council_reference"]}" with address '
                        f'"{item["address"]}" and reason "{item["description"]}" because it was '
                        f'already present in the database.')
        if self.stats is not None:
            self.stats.inc_value(f'applications/{outcome.value}')
        return item

    def abort(self, spider, reason):
        """
        数据库出错时停止爬虫, 不再继续抓取
        """
        if self.stats is not None:
            self.stats.set_value('storage_error', reason)
        if self._closing or self.crawler is None or self.crawler.engine is None:
            return
        self._closing = True
        self.crawler.engine.close_spider(spider or self.crawler.spider, 'storage_error')
