import re
import logging
import scrapy
from datetime import date
from scrapy import Request
from scrapy.exceptions import CloseSpider
from scrapy.http import HtmlResponse
from urllib.parse import quote
from common._date import DATE_FORMATE, get_this_month, parse_lodged_date, format_date
from DASpider.items.mount_gambier_items import MountGambierItem

# 详情块里的标签 -> 字段
LABEL_FIELDS = {
    'Type of Work': 'description',
    'Application No.': 'council_reference',
    'Date Lodged': 'date_lodged',
}

WHITESPACE_RE = re.compile(r'\s+')

logger = logging.getLogger(__name__)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(' ', (text or '').strip())


def node_text(selector) -> str:
    return ''.join(selector.xpath('.//text()').getall()).strip()


def extract_listing(listing):
    """
    解析一条申请: listing 本身的文字是地址, 紧跟着的 div 中是 key/value 详情
    """
    candidate = {
        'council_reference': '',
        'address': collapse_whitespace(''.join(listing.xpath('.//text()').getall())),
        'description': '',
        'date_lodged': '',
    }
    detail = listing.xpath('following-sibling::*[1][self::div]')
    for pair in detail.css('p.rowDataOnly'):
        key = node_text(pair.xpath('./span[has-class("key")]'))
        field = LABEL_FIELDS.get(key)
        if field is None:
            continue
        candidate[field] = node_text(pair.xpath('./span[has-class("inputField")]'))
    if not detail:
        logger.debug(f'no detail block for listing "{candidate["address"]}"')
    return candidate


class MountGambierSpider(scrapy.Spider):
    name = "mount_gambier"
    allowed_domains = ["ecouncil.mountgambier.sa.gov.au"]

    custom_settings = {
        'CONCURRENT_REQUESTS': 1,
        'RETRY_ENABLED': False,
        'COOKIES_ENABLED': True,
    }

    main_url = 'https://ecouncil.mountgambier.sa.gov.au/eservice/daEnquiryInit.do?nodeNum=21461'
    search_url = ('https://ecouncil.mountgambier.sa.gov.au/eservice/daEnquiry.do?number=&lodgeRangeType=on'
                  '&dateFrom={date_from}&dateTo={date_to}&detDateFromString=&detDateToString=&streetName='
                  '&suburb=0&unitNum=&houseNum=0%0D%0A%09%09%09%09%09&planNumber=&strataPlan=&lotNumber='
                  '&propertyName=&searchMode=A&submitButton=Search')
    comment_url = 'mailto:city@mountgambier.sa.gov.au'

    # 入库前需要建好的表
    item_classes = (MountGambierItem,)

    def __init__(self, days=None, *args, **kwargs):
        """
        days: 往前查询的天数, 不传默认查询最近一个月
        """
        super(MountGambierSpider, self).__init__(*args, **kwargs)
        self.days = days
        self.today = date.today()

    def build_search_url(self, date_from: date, date_to: date) -> str:
        return self.search_url.format(
            date_from=quote(date_from.strftime(DATE_FORMATE), safe=''),
            date_to=quote(date_to.strftime(DATE_FORMATE), safe=''),
        )

    async def start(self):
        for request in self.start_requests():
            yield request

    def start_requests(self):
        # 第一次请求只为拿到 JSESSIONID, 没有这个 cookie 查询返回的是空结果
        self.logger.info(f'Retrieving page: {self.main_url}')
        yield Request(self.main_url, callback=self.parse_main, errback=self.on_transport_error,
                      meta={'cookiejar': self.name}, dont_filter=True)

    def parse_main(self, response: HtmlResponse):
        date_from, date_to = get_this_month(self.today, self.days)
        url = self.build_search_url(date_from, date_to)
        self.logger.info(f'Retrieving search results for: {url}')
        yield Request(url, callback=self.parse, errback=self.on_transport_error,
                      meta={'cookiejar': response.meta['cookiejar']}, dont_filter=True)

    def parse(self, response: HtmlResponse):
        """
        解析查询结果
        """
        listings = response.css('h4.non_table_headers')
        if not listings:
            self.logger.warning(f'no applications found at {response.url}, the session may not have been established')
        for listing in listings:
            self.inc_stat('applications/found')
            candidate = extract_listing(listing)
            if not candidate['council_reference'] or not candidate['address']:
                self.logger.debug(f'skipping listing without application number or address: {candidate}')
                self.inc_stat('applications/skipped')
                continue
            yield self.build_item(candidate)

    def build_item(self, candidate) -> MountGambierItem:
        received = parse_lodged_date(candidate['date_lodged'])
        if received is None and candidate['date_lodged']:
            self.logger.warning(f'invalid lodgement date "{candidate["date_lodged"]}" '
                                f'for application "{candidate["council_reference"]}"')
            self.inc_stat('applications/invalid_date')
        item = MountGambierItem()
        item['council_reference'] = candidate['council_reference']
        item['address'] = candidate['address']
        item['description'] = candidate['description']
        item['info_url'] = self.main_url
        item['comment_url'] = self.comment_url
        item['date_scraped'] = format_date(self.today)
        item['date_received'] = format_date(received)
        item['on_notice_from'] = None
        item['on_notice_to'] = None
        return item

    def on_transport_error(self, failure):
        request = getattr(failure, 'request', None)
        url = request.url if request is not None else self.main_url
        self.logger.error(f'request failed for {url}: {failure.getErrorMessage()}')
        if self.stats is not None:
            self.stats.set_value('transport_error', failure.getErrorMessage())
            self.stats.set_value('transport_error_url', url)
        raise CloseSpider('transport_error')

    def closed(self, reason):
        if reason == 'finished':
            self.logger.info('Complete.')

    @property
    def stats(self):
        crawler = getattr(self, 'crawler', None)
        return crawler.stats if crawler is not None else None

    def inc_stat(self, key, count=1):
        if self.stats is not None:
            self.stats.inc_value(key, count)
