"""
사주 기본 데이터 테이블.

천간/지지/오행/음양/지장간/십성 매핑은 모두 서수(index) 기반의 고정 테이블이며
런타임 계산으로 유도하지 않는다.
"""

# ================== 천간 (10) ==================
STEMS = ("甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸")
STEMS_KOREAN = ("갑", "을", "병", "정", "무", "기", "경", "신", "임", "계")
STEMS_ROMAN = ("Jia", "Yi", "Bing", "Ding", "Wu", "Ji", "Geng", "Xin", "Ren", "Gui")

# ================== 지지 (12) ==================
BRANCHES = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")
BRANCHES_KOREAN = ("자", "축", "인", "묘", "진", "사", "오", "미", "신", "유", "술", "해")
BRANCHES_ROMAN = ("Zi", "Chou", "Yin", "Mao", "Chen", "Si", "Wu", "Wei", "Shen", "You", "Xu", "Hai")
ZODIAC_ANIMALS = {
    "ko": ("쥐", "소", "호랑이", "토끼", "용", "뱀", "말", "양", "원숭이", "닭", "개", "돼지"),
    "en": ("Rat", "Ox", "Tiger", "Rabbit", "Dragon", "Snake", "Horse", "Goat",
           "Monkey", "Rooster", "Dog", "Pig"),
}

# ================== 오행 ==================
# 순서 자체가 용신 동점 처리 기준 (목 → 화 → 토 → 금 → 수)
ELEMENTS = ("wood", "fire", "earth", "metal", "water")
ELEMENT_NAMES = {
    "ko": {"wood": "목(木)", "fire": "화(火)", "earth": "토(土)", "metal": "금(金)", "water": "수(水)"},
    "en": {"wood": "wood", "fire": "fire", "earth": "earth", "metal": "metal", "water": "water"},
}

# 천간 오행 / 음양 (천간 서수 기준)
STEM_ELEMENTS = ("wood", "wood", "fire", "fire", "earth", "earth", "metal", "metal", "water", "water")
STEM_POLARITY = ("yang", "yin", "yang", "yin", "yang", "yin", "yang", "yin", "yang", "yin")

# 지지 오행 / 음양 (지지 서수 기준)
BRANCH_ELEMENTS = (
    "water", "earth", "wood", "wood", "earth", "fire",
    "fire", "earth", "metal", "metal", "earth", "water",
)
BRANCH_POLARITY = (
    "yang", "yin", "yang", "yin", "yang", "yin",
    "yang", "yin", "yang", "yin", "yang", "yin",
)

# 지장간 [본기, 중기, 여기] - 순서가 가중치(6, 4, 2)를 결정한다
HIDDEN_STEMS = (
    ("癸",),             # 子
    ("己", "癸", "辛"),  # 丑
    ("甲", "丙", "戊"),  # 寅
    ("乙",),             # 卯
    ("戊", "乙", "癸"),  # 辰
    ("丙", "庚", "戊"),  # 巳
    ("丁", "己"),        # 午
    ("己", "丁", "乙"),  # 未
    ("庚", "壬", "戊"),  # 申
    ("辛",),             # 酉
    ("戊", "辛", "丁"),  # 戌
    ("壬", "甲"),        # 亥
)

# 상생 (key 가 value 를 생함) / 상극 (key 가 value 를 극함)
ELEMENT_PRODUCES = {"wood": "fire", "fire": "earth", "earth": "metal", "metal": "water", "water": "wood"}
ELEMENT_CONTROLS = {"wood": "earth", "fire": "metal", "earth": "water", "metal": "wood", "water": "fire"}
ELEMENT_PRODUCED_BY = {v: k for k, v in ELEMENT_PRODUCES.items()}
ELEMENT_CONTROLLED_BY = {v: k for k, v in ELEMENT_CONTROLS.items()}

# ================== 십성 ==================
TEN_GODS = (
    "companion", "rob_wealth",
    "eating_god", "hurting_officer",
    "indirect_wealth", "direct_wealth",
    "seven_killings", "direct_officer",
    "indirect_seal", "direct_seal",
)
TEN_GOD_NAMES = {
    "companion": {"ko": "비견", "hanja": "比肩", "en": "Companion"},
    "rob_wealth": {"ko": "겁재", "hanja": "劫財", "en": "Rob Wealth"},
    "eating_god": {"ko": "식신", "hanja": "食神", "en": "Eating God"},
    "hurting_officer": {"ko": "상관", "hanja": "傷官", "en": "Hurting Officer"},
    "indirect_wealth": {"ko": "편재", "hanja": "偏財", "en": "Indirect Wealth"},
    "direct_wealth": {"ko": "정재", "hanja": "正財", "en": "Direct Wealth"},
    "seven_killings": {"ko": "편관", "hanja": "七殺", "en": "Seven Killings"},
    "direct_officer": {"ko": "정관", "hanja": "正官", "en": "Direct Officer"},
    "indirect_seal": {"ko": "편인", "hanja": "偏印", "en": "Indirect Seal"},
    "direct_seal": {"ko": "정인", "hanja": "正印", "en": "Direct Seal"},
}

# 일간 기준 관계 → (음양 같음, 음양 다름)
# 관계 키: same(비겁) / output(내가 생함) / wealth(내가 극함) / officer(나를 극함) / resource(나를 생함)
TEN_GOD_MATRIX = {
    "same": ("companion", "rob_wealth"),
    "output": ("eating_god", "hurting_officer"),
    "wealth": ("indirect_wealth", "direct_wealth"),
    "officer": ("seven_killings", "direct_officer"),
    "resource": ("indirect_seal", "direct_seal"),
}

# 일간 설명
STEM_DESCRIPTIONS = {
    "ko": (
        "갑목(甲木) - 큰 나무, 리더십과 진취성",
        "을목(乙木) - 풀과 덩굴, 유연함과 적응력",
        "병화(丙火) - 태양, 열정과 밝은 에너지",
        "정화(丁火) - 촛불, 섬세함과 따뜻한 배려",
        "무토(戊土) - 큰 산, 안정감과 포용력",
        "기토(己土) - 논밭, 실용성과 보살핌",
        "경금(庚金) - 바위와 쇠, 결단력과 의리",
        "신금(辛金) - 보석, 예리함과 섬세한 완벽주의",
        "임수(壬水) - 큰 바다, 지혜와 포용",
        "계수(癸水) - 비와 이슬, 직관과 감수성",
    ),
    "en": (
        "Jia Wood - a great tree, leadership and drive",
        "Yi Wood - grass and vines, flexibility and adaptability",
        "Bing Fire - the sun, passion and bright energy",
        "Ding Fire - a candle, delicacy and warm care",
        "Wu Earth - a great mountain, stability and tolerance",
        "Ji Earth - farmland, practicality and nurture",
        "Geng Metal - rock and iron, decisiveness and loyalty",
        "Xin Metal - a jewel, sharpness and refined perfectionism",
        "Ren Water - the ocean, wisdom and openness",
        "Gui Water - rain and dew, intuition and sensitivity",
    ),
}

# ================== 시진 ==================
# 시(hour) → 지지 서수. 23시와 0시는 子
HOUR_TO_BRANCH = (0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8, 9, 9, 10, 10, 11, 11, 0)

# 오서둔(五鼠遁): 일간 → 子시 천간 서수 (甲己→甲, 乙庚→丙, 丙辛→戊, 丁壬→庚, 戊癸→壬)
HOUR_STEM_START = (0, 2, 4, 6, 8, 0, 2, 4, 6, 8)

# 오호둔(五虎遁): 연간 → 寅월 천간 서수 (甲己→丙, 乙庚→戊, 丙辛→庚, 丁壬→壬, 戊癸→甲)
MONTH_STEM_START = (2, 4, 6, 8, 0, 2, 4, 6, 8, 0)

HOUR_PERIOD_NAMES = {
    "ko": ("자시", "축시", "인시", "묘시", "진시", "사시", "오시", "미시", "신시", "유시", "술시", "해시"),
    "en": ("Zi hour", "Chou hour", "Yin hour", "Mao hour", "Chen hour", "Si hour",
           "Wu hour", "Wei hour", "Shen hour", "You hour", "Xu hour", "Hai hour"),
}
HOUR_RANGES = (
    "23:00-01:00", "01:00-03:00", "03:00-05:00", "05:00-07:00",
    "07:00-09:00", "09:00-11:00", "11:00-13:00", "13:00-15:00",
    "15:00-17:00", "17:00-19:00", "19:00-21:00", "21:00-23:00",
)

# lunar_python 은 인접 연도의 절기를 병음 키로 돌려줄 때가 있다
SOLAR_TERM_ALIASES = {
    "DA_XUE": "大雪",
    "DONG_ZHI": "冬至",
    "XIAO_HAN": "小寒",
    "DA_HAN": "大寒",
    "LI_CHUN": "立春",
    "YU_SHUI": "雨水",
    "JING_ZHE": "惊蛰",
}

# ================== 지지 관계 ==================
SIX_HARMONIES = (("子", "丑"), ("寅", "亥"), ("卯", "戌"), ("辰", "酉"), ("巳", "申"), ("午", "未"))
SIX_CLASHES = (("子", "午"), ("丑", "未"), ("寅", "申"), ("卯", "酉"), ("辰", "戌"), ("巳", "亥"))
THREE_HARMONIES = (
    (("寅", "午", "戌"), "fire"),
    (("巳", "酉", "丑"), "metal"),
    (("申", "子", "辰"), "water"),
    (("亥", "卯", "未"), "wood"),
)
THREE_PUNISHMENTS = (("寅", "巳", "申"), ("丑", "戌", "未"))
MUTUAL_PUNISHMENTS = (("子", "卯"),)
SELF_PUNISHMENTS = ("辰", "午", "酉", "亥")
SIX_HARMS = (("子", "未"), ("丑", "午"), ("寅", "巳"), ("卯", "辰"), ("申", "亥"), ("酉", "戌"))
SIX_DESTRUCTIONS = (("子", "酉"), ("丑", "辰"), ("寅", "亥"), ("卯", "午"), ("巳", "申"), ("未", "戌"))

# ================== 출생지 경도 ==================
CITY_LONGITUDES = {
    "seoul": 126.98, "busan": 129.04, "daegu": 128.60, "incheon": 126.71,
    "gwangju": 126.85, "daejeon": 127.38, "ulsan": 129.31, "sejong": 127.29,
    "gyeonggi": 127.02, "gangwon": 127.73, "chungbuk": 127.49, "chungnam": 126.80,
    "jeonbuk": 127.11, "jeonnam": 126.39, "gyeongbuk": 129.36, "gyeongnam": 128.68,
    "jeju": 126.53, "pyongyang": 125.75, "tokyo": 139.69, "beijing": 116.41,
    "shanghai": 121.47,
    "서울": 126.98, "부산": 129.04, "대구": 128.60, "인천": 126.71,
    "광주": 126.85, "대전": 127.38, "울산": 129.31, "세종": 127.29,
    "경기": 127.02, "강원": 127.73, "충북": 127.49, "충남": 126.80,
    "전북": 127.11, "전남": 126.39, "경북": 129.36, "경남": 128.68,
    "제주": 126.53, "평양": 125.75, "도쿄": 139.69, "베이징": 116.41,
    "상하이": 121.47,
}

PILLAR_SLOTS = ("year", "month", "day", "hour")
PILLAR_LABELS = {
    "ko": {"year": "년지", "month": "월지", "day": "일지", "hour": "시지"},
    "en": {"year": "year branch", "month": "month branch", "day": "day branch", "hour": "hour branch"},
}

LOCALES = ("ko", "en")
GENDERS = ("male", "female")
# 상담 카테고리 (초개인화 컨텍스트 범위)
CATEGORIES = ("day_master", "personality", "career", "wealth", "relationship", "health", "fortune", "ten_gods", "stars")
