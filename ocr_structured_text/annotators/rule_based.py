"""
Rule-based text annotator.

Portable stand-in for a platform data detector and named-entity tagger:
regular expressions find phones, links, addresses and dates, and small
gazetteers drive person / place / organization tagging.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..models.data_structures import DataMatch, NameTag
from ..models.enums import DataKind, EntityKind

logger = logging.getLogger(__name__)


MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}
_MONTH_NAMES = (r'(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|'
                r'Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)')

_STREET_SUFFIXES = (
    'Street', 'St', 'Avenue', 'Ave', 'Road', 'Rd', 'Boulevard', 'Blvd', 'Drive', 'Dr',
    'Lane', 'Ln', 'Way', 'Court', 'Ct', 'Circle', 'Cir', 'Place', 'Pl', 'Parkway', 'Pkwy',
    'Highway', 'Hwy', 'Square', 'Sq', 'Terrace', 'Plaza',
)
_STREET_SUFFIX_PATTERN = '|'.join(sorted(
    {s for suffix in _STREET_SUFFIXES for s in (suffix, suffix.upper())}, key=len, reverse=True))

PHONE_PATTERN = re.compile(
    r'(?<![\w+])(?:\+\d{1,3}[\s.-]?|1[\s.-])?(?:\(\d{2,4}\)|\d{2,4})[\s.-]?\d{3,4}[\s.-]?\d{3,4}(?!\w)'
)
EMAIL_PATTERN = re.compile(r'[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}')
URL_PATTERN = re.compile(
    r'(?<![@\w.])(?:https?://[^\s<>"]+|www\.[^\s<>"]+|'
    r'[a-z0-9-]+(?:\.[a-z0-9-]+)*\.(?:com|org|net|edu|gov|io|co|us|uk|ca|de|biz|info|ai|app|dev)'
    r'(?:/[^\s<>"]*)?)(?![\w@-]|\.\w)',
    re.IGNORECASE,
)
ADDRESS_PATTERN = re.compile(
    r'\b\d{1,6}\s+(?:[A-Z0-9][\w.\'-]*\s+){0,4}(?:' + _STREET_SUFFIX_PATTERN + r')\b\.?'
    r'(?:,?\s*(?:Suite|Ste\.?|Apt\.?|Unit|#)\s*[\w-]+)?'
    r'(?:(?:,[ \t]*|[ \t]*\n[ \t]*)[A-Z][A-Za-z .\'-]+,[ \t]*[A-Z]{2}[ \t]+\d{5}(?:-\d{4})?'
    r'(?:,?[ \t]*(?:USA|U\.S\.A\.|United States))?)?'
)
DATE_PATTERNS = (
    (re.compile(r'\b(\d{1,2})/(\d{1,2})/(\d{4})\b'), 'mdy'),
    (re.compile(r'\b(\d{4})-(\d{2})-(\d{2})\b'), 'ymd'),
    (re.compile(r'\b(' + _MONTH_NAMES + r')\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b', re.IGNORECASE), 'month_day_year'),
    (re.compile(r'\b(\d{1,2})(?:st|nd|rd|th)?\s+(' + _MONTH_NAMES + r')\.?,?\s+(\d{4})\b', re.IGNORECASE), 'day_month_year'),
)

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9&][\w.'&-]*")

HONORIFICS = {'mr', 'mrs', 'ms', 'miss', 'dr', 'prof'}

GIVEN_NAMES = {
    'aaron', 'adam', 'alex', 'alexander', 'alice', 'amanda', 'amy', 'andrew', 'angela', 'anna',
    'anthony', 'ashley', 'barbara', 'ben', 'benjamin', 'beth', 'betty', 'bob', 'brandon', 'brian',
    'carl', 'carlos', 'carol', 'catherine', 'charles', 'chris', 'christina', 'christopher', 'daniel',
    'david', 'deborah', 'dennis', 'diana', 'donald', 'dorothy', 'edward', 'elizabeth', 'emily', 'emma',
    'eric', 'frank', 'gary', 'george', 'grace', 'gregory', 'hannah', 'harry', 'heather', 'helen',
    'henry', 'jack', 'jacob', 'james', 'jane', 'janet', 'jason', 'jeff', 'jeffrey', 'jennifer',
    'jessica', 'jim', 'joe', 'john', 'jonathan', 'jose', 'joseph', 'joshua', 'julia', 'justin',
    'karen', 'kate', 'katherine', 'kelly', 'kevin', 'kimberly', 'laura', 'lauren', 'linda', 'lisa',
    'maria', 'mark', 'mary', 'matthew', 'megan', 'melissa', 'michael', 'michelle', 'mike', 'nancy',
    'nicholas', 'nicole', 'olivia', 'patricia', 'patrick', 'paul', 'peter', 'rachel', 'raymond',
    'rebecca', 'richard', 'robert', 'ryan', 'samantha', 'samuel', 'sandra', 'sarah', 'scott', 'sean',
    'sharon', 'sophia', 'stephanie', 'stephen', 'steven', 'susan', 'thomas', 'timothy', 'tom',
    'tyler', 'victoria', 'walter', 'william', 'wei', 'yuki', 'priya', 'raj', 'ahmed', 'fatima',
    'mohammed', 'luis', 'juan', 'ana', 'sofia', 'liam', 'noah', 'ethan', 'mia', 'chloe', 'zoe',
}

PLACES = {
    'alabama', 'alaska', 'arizona', 'arkansas', 'california', 'colorado', 'connecticut', 'delaware',
    'florida', 'georgia', 'hawaii', 'idaho', 'illinois', 'indiana', 'iowa', 'kansas', 'kentucky',
    'louisiana', 'maine', 'maryland', 'massachusetts', 'michigan', 'minnesota', 'mississippi',
    'missouri', 'montana', 'nebraska', 'nevada', 'new hampshire', 'new jersey', 'new mexico',
    'new york', 'north carolina', 'north dakota', 'ohio', 'oklahoma', 'oregon', 'pennsylvania',
    'rhode island', 'south carolina', 'south dakota', 'tennessee', 'texas', 'utah', 'vermont',
    'virginia', 'washington', 'west virginia', 'wisconsin', 'wyoming',
    'atlanta', 'austin', 'boston', 'chicago', 'dallas', 'denver', 'detroit', 'houston', 'las vegas',
    'los angeles', 'miami', 'minneapolis', 'nashville', 'philadelphia', 'phoenix', 'portland',
    'san diego', 'san francisco', 'san jose', 'seattle', 'london', 'paris', 'berlin', 'tokyo',
    'toronto', 'sydney', 'madrid', 'rome', 'dublin', 'singapore',
    'america', 'united states', 'canada', 'mexico', 'england', 'france', 'germany', 'italy',
    'spain', 'japan', 'china', 'india', 'brazil', 'australia', 'ireland',
}

ORGANIZATION_SUFFIXES = {
    'inc', 'llc', 'llp', 'corp', 'corporation', 'ltd', 'limited', 'co', 'company', 'group',
    'associates', 'partners', 'solutions', 'services', 'systems', 'technologies', 'labs', 'gmbh', 'plc',
}
ORGANIZATION_WORDS = {
    'university', 'college', 'bank', 'institute', 'hospital', 'foundation', 'agency', 'department',
    'ministry', 'council', 'association', 'society', 'school', 'academy',
}

# Words that never belong to a person's name on their own
NON_NAME_WORDS = {
    'senior', 'junior', 'director', 'manager', 'president', 'ceo', 'cto', 'cfo', 'vp', 'chief',
    'head', 'lead', 'engineer', 'founder', 'partner', 'officer', 'phone', 'email', 'tel', 'fax',
    'mobile', 'office', 'street', 'avenue', 'road',
}

LEADING_STOPWORDS = {'the', 'a', 'an', 'at', 'in', 'on', 'for', 'from', 'to', 'by', 'with', 'and', 'of'}
PLACE_PREPOSITIONS = {'in', 'from', 'near'}


def _lookup_key(token: str) -> str:
    return token.lower().rstrip('.,')


def _parse_date(groups: Tuple[str, ...], shape: str) -> Optional[date]:
    try:
        if shape == 'mdy':
            return date(int(groups[2]), int(groups[0]), int(groups[1]))
        if shape == 'ymd':
            return date(int(groups[0]), int(groups[1]), int(groups[2]))
        if shape == 'month_day_year':
            return date(int(groups[2]), MONTHS[groups[0][:3].lower()], int(groups[1]))
        return date(int(groups[2]), MONTHS[groups[1][:3].lower()], int(groups[0]))
    except (ValueError, KeyError):
        return None


class RuleBasedAnnotator:
    """Regex and gazetteer implementation of ``TextAnnotator``"""

    # ========================================================================
    # Data detection
    # ========================================================================

    def detect_data(self, text: str) -> List[DataMatch]:
        if not text.strip():
            return []

        candidates: List[DataMatch] = []

        for match in EMAIL_PATTERN.finditer(text):
            candidates.append(DataMatch(DataKind.LINK, match.group(0), match.start(), match.end(),
                                        url=f"mailto:{match.group(0)}"))

        for match in URL_PATTERN.finditer(text):
            raw = match.group(0).rstrip('.,;:!?)\'"')
            url = raw if re.match(r'^https?://', raw, re.IGNORECASE) else f"http://{raw}"
            candidates.append(DataMatch(DataKind.LINK, raw, match.start(), match.start() + len(raw), url=url))

        for match in PHONE_PATTERN.finditer(text):
            digits = re.sub(r'\D', '', match.group(0))
            if 10 <= len(digits) <= 15:
                candidates.append(DataMatch(DataKind.PHONE, match.group(0), match.start(), match.end()))

        for pattern, shape in DATE_PATTERNS:
            for match in pattern.finditer(text):
                parsed = _parse_date(match.groups(), shape)
                if parsed is None:
                    logger.debug("Dropping unparseable date %r", match.group(0))
                    continue
                candidates.append(DataMatch(DataKind.DATE, match.group(0), match.start(), match.end(),
                                            parsed_date=parsed))

        for match in ADDRESS_PATTERN.finditer(text):
            candidates.append(DataMatch(DataKind.ADDRESS, match.group(0).strip(), match.start(), match.end()))

        return self._resolve_overlaps(candidates)

    @staticmethod
    def _resolve_overlaps(candidates: Sequence[DataMatch]) -> List[DataMatch]:
        """Keep the earliest, then longest, span wherever matches overlap."""
        kept: List[DataMatch] = []
        for candidate in sorted(candidates, key=lambda m: (m.start, -(m.end - m.start))):
            if any(candidate.start < k.end and k.start < candidate.end for k in kept):
                continue
            kept.append(candidate)
        return kept

    # ========================================================================
    # Name tagging
    # ========================================================================

    def tag_names(self, text: str) -> List[NameTag]:
        tags: List[NameTag] = []
        for run, previous_word in self._capitalized_runs(text):
            tag = self._classify_run(text, run, previous_word)
            if tag:
                tags.append(tag)
        return tags

    def _capitalized_runs(self, text: str):
        """Yield runs of capitalized tokens separated only by spaces, with the word before each run."""
        run: List[Tuple[str, int, int]] = []
        previous_word = None
        last_word = None
        last_end = 0

        for match in _TOKEN_PATTERN.finditer(text):
            token = match.group(0)
            gap = text[last_end:match.start()]
            contiguous = (bool(run) and gap != '' and gap.strip(' \t') == ''
                          and not self._ends_sentence(run[-1][0]))
            capitalized = token[:1].isupper() or token == '&'

            if run and not (capitalized and contiguous):
                yield run, previous_word
                run = []
            if capitalized:
                if not run:
                    previous_word = last_word if gap.strip(' \t') == '' else None
                run.append((token, match.start(), match.end()))
            last_word = token
            last_end = match.end()

        if run:
            yield run, previous_word

    @staticmethod
    def _ends_sentence(token: str) -> bool:
        """A trailing period ends the run unless the token is an honorific or an initial."""
        if not token.endswith('.'):
            return False
        stem = token.rstrip('.')
        return len(stem) > 1 and stem.lower() not in HONORIFICS

    def _classify_run(self, text: str, run: List[Tuple[str, int, int]],
                      previous_word: Optional[str]) -> Optional[NameTag]:
        while run and _lookup_key(run[0][0]) in LEADING_STOPWORDS:
            previous_word = run[0][0]
            run = run[1:]
        if not run:
            return None

        keys = [_lookup_key(token) for token, _, _ in run]

        if keys[-1] in ORGANIZATION_SUFFIXES and len(run) >= 2 or any(k in ORGANIZATION_WORDS for k in keys):
            return self._make_tag(EntityKind.ORGANIZATION, text, run)

        person = self._person_span(run, keys)
        if person:
            return self._make_tag(EntityKind.PERSON, text, person)

        joined = ' '.join(keys)
        if joined in PLACES:
            return self._make_tag(EntityKind.PLACE, text, run)
        for size in (3, 2, 1):
            for i in range(len(run) - size + 1):
                if ' '.join(keys[i:i + size]) in PLACES:
                    return self._make_tag(EntityKind.PLACE, text, run[i:i + size])

        if previous_word and previous_word.lower() in PLACE_PREPOSITIONS and len(run) <= 3:
            if all(token.isalpha() for token, _, _ in run):
                return self._make_tag(EntityKind.PLACE, text, run)
        return None

    @staticmethod
    def _person_span(run: List[Tuple[str, int, int]], keys: List[str]) -> Optional[List[Tuple[str, int, int]]]:
        start = 0
        if keys[0] in HONORIFICS:
            start = 1
        elif keys[0] not in GIVEN_NAMES:
            return None

        span = run[:start]
        for (token, s, e), key in zip(run[start:], keys[start:]):
            word = token.rstrip('.,')
            if key in NON_NAME_WORDS or key in ORGANIZATION_SUFFIXES or not word.replace("'", '').replace('-', '').isalpha():
                break
            span.append((token, s, e))
            if len(span) - start >= 3:
                break

        if len(span) - start < 1 or (start == 0 and len(span) < 2):
            return None
        return span

    @staticmethod
    def _make_tag(kind: EntityKind, text: str, run: Sequence[Tuple[str, int, int]]) -> NameTag:
        start = run[0][1]
        end = run[-1][2]
        last_token = run[-1][0]
        if RuleBasedAnnotator._ends_sentence(last_token):
            end -= len(last_token) - len(last_token.rstrip('.'))
        return NameTag(kind=kind, text=text[start:end], start=start, end=end)
