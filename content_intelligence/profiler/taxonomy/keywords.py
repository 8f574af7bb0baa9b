"""
Keyword dictionaries for header name signals

Each concept lists the words a header may use for it, across scripts.
Matching rules live in profiler.names; every script goes through the same matcher.
"""
from typing import Dict, List


NAME_SIGNAL_KEYWORDS: Dict[str, List[str]] = {
    'contains_id': [
        # Latin
        'id', 'ids', 'no', 'nr', 'num', 'nbr', 'number', 'numero', 'número', 'nummer',
        'code', 'codigo', 'código', 'identifier', 'identificador', 'identifiant',
        'key', 'ref', 'uuid', 'guid',
        # Symbols
        '#', '№',
        # Hangul
        '번호', '코드', '아이디', '식별',
        # Kana / Han
        '番号', '编号', '編號', 'コード', '代码', '識別',
        # Cyrillic
        'номер', 'код',
    ],

    'contains_name': [
        'name', 'names', 'nombre', 'nom', 'nome', 'label', 'display',
        '이름', '성명', '명칭',
        '名前', '氏名', '姓名', '名称', '名稱',
        'имя', 'название',
    ],

    'contains_target': [
        'target', 'goal', 'quota', 'objective', 'objetivo', 'objectif', 'meta', 'ziel',
        'benchmark', 'expected', 'cible',
        '목표', '목표치',
        '目標', '目标',
        'цель',
    ],

    'contains_date': [
        'date', 'dates', 'dt', 'day', 'days', 'time', 'timestamp', 'datetime',
        'week', 'month', 'year', 'quarter', 'period', 'periodo', 'período',
        'fecha', 'dia', 'día', 'mes', 'año', 'datum', 'jour', 'mois', 'année',
        '날짜', '일자', '일시', '기간', '연월',
        '日付', '日期', '時間', '时间', '年月', '期間',
        'дата', 'период',
    ],

    'contains_rate': [
        'rate', 'rates', 'ratio', 'pct', 'percent', 'percentage', 'porcentaje',
        'pourcentage', 'tasa', 'taux', 'prozent',
        '%', '‰',
        '비율', '비중', '퍼센트',
        '比率', '比例', '割合', '百分比',
        'доля', 'процент',
    ],

    'contains_amount': [
        'amount', 'amt', 'total', 'sum', 'balance', 'value', 'price', 'cost',
        'monto', 'importe', 'valor', 'montant', 'betrag', 'summe',
        '금액', '합계', '총액',
        '金額', '金额', '合計', '合计',
        'сумма', 'итог',
    ],
}


# Symbols that mark a numeric cell as monetary
CURRENCY_SYMBOLS: str = "$€£¥₩₹₽₺₫₱฿¢"
