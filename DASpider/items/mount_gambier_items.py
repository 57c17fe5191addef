from . import BaseItem
from scrapy import Field


class MountGambierItem(BaseItem):
    council_reference = Field()
    address = Field()
    description = Field()
    info_url = Field()
    comment_url = Field()
    date_scraped = Field()
    date_received = Field()
    on_notice_from = Field()
    on_notice_to = Field()

    class Meta:
        table = 'data'
        unique_fields = ['council_reference']
        # scrapy sorts item fields by name, the table keeps this order
        columns = (
            'council_reference',
            'address',
            'description',
            'info_url',
            'comment_url',
            'date_scraped',
            'date_received',
            'on_notice_from',
            'on_notice_to',
        )
