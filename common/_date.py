import re
import calendar
from datetime import date, timedelta

DATE_FORMATE = "%d/%m/%Y"
DB_DATE_FORMATE = "%Y-%m-%d"

# day may drop its leading zero, month and year may not
LODGED_DATE_RE = re.compile(r'(\d{1,2})/(\d{2})/(\d{4})', re.ASCII)


def parse_lodged_date(d: str):
    """
    解析 D/MM/YYYY 格式的日期, 不合法返回 None
    """
    if not d:
        return None
    match = LODGED_DATE_RE.fullmatch(d)
    if not match:
        return None
    day, month, year = (int(x) for x in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def one_month_before(d: date) -> date:
    if d.month == 1:
        year, month = d.year - 1, 12
    else:
        year, month = d.year, d.month - 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def get_this_month(today: date = None, days=None):
    """
    计算查询的时间范围 (date_from, date_to), 默认为最近一个月
    days: 指定往前查询的天数
    """
    today = today or date.today()
    if days is None:
        return one_month_before(today), today
    return today - timedelta(int(days)), today


def format_date(d, fmt=DB_DATE_FORMATE):
    return d.strftime(fmt) if d else ''
