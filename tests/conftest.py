from __future__ import annotations

from datetime import date

import pytest
from scrapy import Request
from scrapy.http import HtmlResponse

from DASpider.spiders.mount_gambier_spider import MountGambierSpider

SEARCH_RESULTS_HTML = """
<html><body>
<div id="fullcontent">
  <h4 class="non_table_headers">12 Commercial   Street West,
      MOUNT GAMBIER  SA  5290</h4>
  <div>
    <p class="rowDataOnly"><span class="key">Application No.</span><span class="inputField">381/1234/2018</span></p>
    <p class="rowDataOnly"><span class="key">Zone</span><span class="inputField">Residential</span></p>
    <p class="rowDataOnly"><span class="key">Type of Work</span><span class="inputField">Verandah</span></p>
    <p class="rowDataOnly"><span class="key">Date Lodged</span><span class="inputField">2/08/2018</span></p>
  </div>
  <h4 class="non_table_headers">4 Crouch Street South, MOUNT GAMBIER SA 5290</h4>
  <div>
    <p class="rowDataOnly"><span class="key">Application No.</span><span class="inputField">381/1235/2018</span></p>
    <p class="rowDataOnly"><span class="key">Type of Work</span><span class="inputField">Shed</span></p>
    <p class="rowDataOnly"><span class="key">Date Lodged</span><span class="inputField">31/04/2018</span></p>
  </div>
  <h4 class="non_table_headers">   </h4>
  <div>
    <p class="rowDataOnly"><span class="key">Application No.</span><span class="inputField">381/1236/2018</span></p>
  </div>
  <h4 class="non_table_headers">7 Helen Street, MOUNT GAMBIER SA 5290</h4>
  <div>
    <p class="rowDataOnly"><span class="key">Type of Work</span><span class="inputField">Dwelling</span></p>
  </div>
</div>
</body></html>
"""

EMPTY_RESULTS_HTML = """
<html><body><div id="fullcontent"><p>Your session has expired.</p></div></body></html>
"""


def make_response(body: str, url: str = None, cookiejar: str = 'mount_gambier') -> HtmlResponse:
    url = url or MountGambierSpider.main_url
    request = Request(url, meta={'cookiejar': cookiejar})
    return HtmlResponse(url=url, body=body, encoding='utf-8', request=request)


class DummyStats:
    def __init__(self):
        self.values = {}

    def inc_value(self, key, count=1, start=0):
        self.values[key] = self.values.get(key, start) + count

    def set_value(self, key, value):
        self.values[key] = value

    def get_value(self, key, default=None):
        return self.values.get(key, default)


class DummyCrawler:
    def __init__(self):
        self.stats = DummyStats()


@pytest.fixture
def spider():
    spider = MountGambierSpider()
    spider.today = date(2018, 8, 20)
    spider.crawler = DummyCrawler()
    return spider


@pytest.fixture
def search_response():
    return make_response(SEARCH_RESULTS_HTML)


class DummyEngine:
    def __init__(self):
        self.closed = []

    def close_spider(self, spider, reason="cancelled"):
        self.closed.append((spider, reason))


class DummyPipelineCrawler(DummyCrawler):
    def __init__(self, spider=None):
        super().__init__()
        self.engine = DummyEngine()
        self.spider = spider
