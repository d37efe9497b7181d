"""
신살 (special stars) detection.

Each rule is independent; a rule yields at most one Star carrying every
pillar position that satisfied it.
"""
from saju_agent.constants import BRANCHES, STEMS
from saju_agent.models import FourPillars, Star

ALL_POSITIONS = ("year", "month", "day", "hour")
NON_DAY_POSITIONS = ("year", "month", "hour")
NON_YEAR_POSITIONS = ("month", "day", "hour")


class StarCalculator:
    """신살 계산기"""

    def __init__(self):
        # 일간 기준 → 지지
        nobleman = {  # 天乙貴人
            "甲": ("丑", "未"), "乙": ("子", "申"), "丙": ("亥", "酉"), "丁": ("亥", "酉"),
            "戊": ("丑", "未"), "己": ("子", "申"), "庚": ("丑", "未"), "辛": ("寅", "午"),
            "壬": ("卯", "巳"), "癸": ("卯", "巳"),
        }
        wenchang = {  # 文昌貴人
            "甲": ("巳",), "乙": ("午",), "丙": ("申",), "丁": ("酉",), "戊": ("申",),
            "己": ("酉",), "庚": ("亥",), "辛": ("子",), "壬": ("寅",), "癸": ("卯",),
        }
        xuetang = {  # 學堂貴人
            "甲": ("亥",), "乙": ("午",), "丙": ("寅",), "丁": ("酉",), "戊": ("寅",),
            "己": ("酉",), "庚": ("巳",), "辛": ("子",), "壬": ("申",), "癸": ("卯",),
        }
        jinyu = {  # 金輿祿
            "甲": ("辰",), "乙": ("巳",), "丙": ("未",), "丁": ("申",), "戊": ("未",),
            "己": ("申",), "庚": ("戌",), "辛": ("亥",), "壬": ("丑",), "癸": ("寅",),
        }
        yangren = {  # 羊刃
            "甲": ("卯",), "乙": ("辰",), "丙": ("午",), "丁": ("未",), "戊": ("午",),
            "己": ("未",), "庚": ("酉",), "辛": ("戌",), "壬": ("子",), "癸": ("丑",),
        }

        # 일지 기준 (삼합 그룹) → 지지
        jiangxing = {  # 將星: 申子辰→子, 寅午戌→午, 巳酉丑→酉, 亥卯未→卯
            "申": "子", "子": "子", "辰": "子", "寅": "午", "午": "午", "戌": "午",
            "巳": "酉", "酉": "酉", "丑": "酉", "亥": "卯", "卯": "卯", "未": "卯",
        }
        huagai = {  # 華蓋: 申子辰→辰, 寅午戌→戌, 巳酉丑→丑, 亥卯未→未
            "申": "辰", "子": "辰", "辰": "辰", "寅": "戌", "午": "戌", "戌": "戌",
            "巳": "丑", "酉": "丑", "丑": "丑", "亥": "未", "卯": "未", "未": "未",
        }
        taohua = {  # 桃花: 申子辰→酉, 寅午戌→卯, 巳酉丑→午, 亥卯未→子
            "申": "酉", "子": "酉", "辰": "酉", "寅": "卯", "午": "卯", "戌": "卯",
            "巳": "午", "酉": "午", "丑": "午", "亥": "子", "卯": "子", "未": "子",
        }
        yima = {  # 驛馬: 申子辰→寅, 寅午戌→申, 巳酉丑→亥, 亥卯未→巳
            "申": "寅", "子": "寅", "辰": "寅", "寅": "申", "午": "申", "戌": "申",
            "巳": "亥", "酉": "亥", "丑": "亥", "亥": "巳", "卯": "巳", "未": "巳",
        }

        # 연지 기준 → 지지
        jiesha = {  # 劫煞: 申子辰→巳, 寅午戌→亥, 巳酉丑→寅, 亥卯未→申
            "申": "巳", "子": "巳", "辰": "巳", "寅": "亥", "午": "亥", "戌": "亥",
            "巳": "寅", "酉": "寅", "丑": "寅", "亥": "申", "卯": "申", "未": "申",
        }

        # 魁罡 일주
        self.kuigang_pillars = {"庚辰", "庚戌", "壬辰", "壬戌", "戊戌"}

        # (key, 이름, 한자, 영문, 길흉, 기준, 검사 위치, 표, 설명 ko, 설명 en)
        self.rules = [
            ("cheoneul", "천을귀인", "天乙貴人", "Heavenly Nobleman", "auspicious",
             "day_stem", ALL_POSITIONS, nobleman,
             "어려울 때 귀인의 도움을 받는 최고의 길신",
             "The foremost auspicious star: help from benefactors in hard times"),
            ("munchang", "문창귀인", "文昌貴人", "Literary Star", "auspicious",
             "day_stem", ALL_POSITIONS, wenchang,
             "학문과 글재주, 시험운이 좋음",
             "Talent for study and writing, luck in examinations"),
            ("hakdang", "학당귀인", "學堂貴人", "Academy Star", "auspicious",
             "day_stem", ALL_POSITIONS, xuetang,
             "배움을 즐기고 지식을 쌓는 기운",
             "Enjoys learning and accumulates knowledge"),
            ("geumyeo", "금여록", "金輿祿", "Golden Carriage", "auspicious",
             "day_stem", ALL_POSITIONS, jinyu,
             "재물과 배우자 복, 품위 있는 생활",
             "Blessings of wealth and spouse, a dignified life"),
            ("jangseong", "장성살", "將星", "General Star", "auspicious",
             "day_branch", NON_DAY_POSITIONS, jiangxing,
             "리더십과 통솔력, 조직에서 두각",
             "Leadership and command, stands out in organizations"),
            ("hwagae", "화개살", "華蓋", "Canopy Star", "neutral",
             "day_branch", NON_DAY_POSITIONS, huagai,
             "예술과 종교, 학문적 깊이와 고독",
             "Depth in art, religion and scholarship, with solitude"),
            ("dohwa", "도화살", "桃花", "Peach Blossom", "neutral",
             "day_branch", NON_DAY_POSITIONS, taohua,
             "매력과 인기, 이성 인연이 많음",
             "Charm and popularity, many romantic connections"),
            ("yeokma", "역마살", "驛馬", "Traveling Horse", "neutral",
             "day_branch", NON_DAY_POSITIONS, yima,
             "이동과 변화가 많고 활동 무대가 넓음",
             "Much movement and change, a wide field of activity"),
            ("geopsal", "겁살", "劫煞", "Robbery Star", "inauspicious",
             "year_branch", NON_YEAR_POSITIONS, jiesha,
             "갑작스러운 손실이나 경쟁에 주의",
             "Beware of sudden losses or competition"),
            ("yangin", "양인살", "羊刃", "Goat Blade", "inauspicious",
             "day_stem", ALL_POSITIONS, yangren,
             "강한 추진력과 함께 건강과 사고에 주의",
             "Strong drive, but take care of health and accidents"),
        ]

    def _lookup(self, table, key):
        targets = table.get(key, ())
        return (targets,) if isinstance(targets, str) else targets

    def check_rule(self, rule, pillars: FourPillars) -> list:
        _, _, _, _, _, basis, positions, table, _, _ = rule
        if basis == "day_stem":
            key = pillars.day.stem
        elif basis == "day_branch":
            key = pillars.day.branch
        else:
            key = pillars.year.branch
        targets = self._lookup(table, key)
        return [pos for pos in positions if pillars.slot(pos).branch in targets]

    def check_kuigang(self, pillars: FourPillars) -> bool:
        return pillars.day.ganzhi in self.kuigang_pillars

    def get_kong_wang(self, stem: str, branch: str) -> tuple:
        """
        공망: 해당 간지가 속한 순(旬)에서 짝이 없는 두 지지
        (지지 서수 - 천간 서수) % 12 가 순의 시작 지지이고, 그 직전 두 지지가 공망
        """
        start = (BRANCHES.index(branch) - STEMS.index(stem)) % 12
        return BRANCHES[(start - 2) % 12], BRANCHES[(start - 1) % 12]

    def detect(self, pillars: FourPillars) -> list:
        stars = []
        for rule in self.rules:
            positions = self.check_rule(rule, pillars)
            if positions:
                key, name, hanja, name_en, star_type, _, _, _, desc, desc_en = rule
                stars.append(Star(
                    key=key, name=name, hanja=hanja, name_en=name_en, type=star_type,
                    description=desc, description_en=desc_en, positions=positions,
                ))

        if self.check_kuigang(pillars):
            stars.append(Star(
                key="goegang", name="괴강살", hanja="魁罡", name_en="Kuigang", type="neutral",
                description="강한 기질과 결단력, 극단적인 성향에 주의",
                description_en="Strong temperament and decisiveness, beware of extremes",
                positions=["day"],
            ))

        void = self.get_kong_wang(pillars.day.stem, pillars.day.branch)
        void_positions = [pos for pos in NON_DAY_POSITIONS if pillars.slot(pos).branch in void]
        if void_positions:
            stars.append(Star(
                key="gongmang", name="공망", hanja="空亡", name_en="Void", type="inauspicious",
                description="해당 자리의 기운이 비어 노력 대비 결과가 더딤",
                description_en="The affected pillar's energy is empty; results lag behind effort",
                positions=void_positions,
            ))
        return stars


_STAR_CALC = StarCalculator()


def detect_stars(pillars: FourPillars) -> list:
    return _STAR_CALC.detect(pillars)
