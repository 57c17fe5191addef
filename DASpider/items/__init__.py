import scrapy


class BaseItem(scrapy.Item):
    """
    所有议会 item 的基类, Meta 描述入库的表结构
    """

    class Meta:
        table = None
        unique_fields = []
        columns = ()
