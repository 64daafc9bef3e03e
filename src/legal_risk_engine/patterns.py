"""Risk pattern catalog.

The catalog is a declarative table of ``RiskPattern`` entries grouped in
three tiers:

- document-level patterns, scanned against the full text and against every
  clause;
- clause-only patterns, which only make sense for a scoped clause (deadline
  language is everywhere in a full document);
- contextual checks, extra patterns that apply to a single document type.
  A check in ``MatchMode.ABSENT`` fires when none of its triggers occur.

Each trigger carries negative-context exclusions so that benign phrasings
("unlimited support", "we do not share your information with third
parties", "non-binding arbitration") do not fire. ``DEFAULT_CATALOG`` is
built once at import and is never mutated; pass another ``PatternCatalog``
to the analyzers to run with different rules.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .models import DocumentType, MatchMode, RiskCategory, RiskPattern, Severity

CATALOG_VERSION = "1.1.0"

_LEASE = frozenset({DocumentType.LEASE})
_LOAN = frozenset({DocumentType.LOAN_AGREEMENT})
_CONTRACT = frozenset({DocumentType.CONTRACT})
_CREDIT = frozenset({DocumentType.LOAN_AGREEMENT, DocumentType.CONTRACT})
_SHARED_OBLIGATION = frozenset(
    {DocumentType.LEASE, DocumentType.LOAN_AGREEMENT, DocumentType.CONTRACT}
)

# Shared trigger and exclusion sets reused by catalog entries and contextual checks
_AUTO_RENEWAL_TRIGGERS = (
    r"\bautomatic(?:ally)?\s+renew(?:s|ed|al)?\b",
    r"\bauto[\s-]?renew(?:s|ed|al|ing)?\b",
    r"\brenew(?:s|ed)?\s+automatically\b",
    r"\bshall\s+renew\s+for\s+successive\b",
)
_AUTO_RENEWAL_EXCLUSIONS = (
    r"\brenew\w*\s+(?:your\s+|the\s+|any\s+)?(?:subscription\s+|membership\s+|account\s+)?"
    r"(?:benefits|perks|rewards|points|discounts?|credits)\b",
    r"\b(?:not|never)\s+(?:\w+\s+){0,2}(?:be\s+)?"
    r"(?:automatically\s+renew|auto[\s-]?renew|renew\s+automatically)",
    r"\bno\s+automatic\s+renewal\b",
)
_DATA_SHARING_EXCLUSIONS = (
    r"\b(?:do|does|will|shall|would)\s+not\s+(?:\w+\s+){0,2}"
    r"(?:share|sell|rent|disclose|transfer|provide)",
    r"\b(?:don't|doesn't|won't|never)\s+(?:\w+\s+){0,2}"
    r"(?:share|sell|rent|disclose|transfer|provide)",
    r"\bnot\s+(?:be\s+)?(?:shared|sold|rented|disclosed|transferred)\b",
)
_INDEMNITY_EXCLUSIONS = (
    r"\b(?:not|never)\s+(?:be\s+)?(?:required|obligated)\s+to\s+indemnify",
    r"\bneither\s+party\s+(?:shall|will)\s+(?:be\s+required\s+to\s+)?indemnify",
)
_PREPAYMENT_EXCLUSIONS = (
    r"\bno\s+(?:prepayment|early\s+(?:re)?payment)\s+(?:penalt|fee|charge|premium)",
    r"\bwithout\s+(?:any\s+)?(?:prepayment\s+)?(?:penalty|premium|fee)",
)


# ---------------------------------------------------------------------------
# Document-level patterns
# ---------------------------------------------------------------------------

DOCUMENT_PATTERNS: tuple[RiskPattern, ...] = (
    # Financial
    RiskPattern(
        id="unlimited-liability",
        name="Unlimited Liability",
        category=RiskCategory.FINANCIAL,
        severity=Severity.HIGH,
        triggers=(
            r"\bunlimited\s+(?:personal\s+)?(?:liability|damages)\b",
            r"\bliab(?:le|ility)\s+(?:shall\s+be\s+|is\s+|will\s+be\s+)?unlimited\b",
            r"\bwithout\s+(?:any\s+)?(?:limit|limitation|cap)\s+(?:on|of|to)\s+"
            r"(?:its\s+|your\s+|the\s+|their\s+)?liability\b",
        ),
        exclusions=(r"\b(?:no|not|never|nor)\s+(?:\w+\s+){0,3}unlimited\s+(?:liability|damages)",),
        description=(
            'Unlimited liability ("{match}"): you may be liable for damages '
            "or losses without any cap."
        ),
        recommendation="Negotiate a cap on liability or exclude consequential damages.",
        concept="unlimited liab",
    ),
    RiskPattern(
        id="automatic-renewal",
        name="Automatic Renewal",
        category=RiskCategory.FINANCIAL,
        severity=Severity.MEDIUM,
        triggers=_AUTO_RENEWAL_TRIGGERS,
        exclusions=_AUTO_RENEWAL_EXCLUSIONS,
        description=(
            'Automatic renewal ("{match}") may lock you into further terms and charges.'
        ),
        recommendation=(
            "Make sure you can cancel before renewal and note the notice deadline."
        ),
        concept="auto renew",
    ),
    RiskPattern(
        id="late-fees",
        name="Late Fees and Penalties",
        category=RiskCategory.FINANCIAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\blate\s+(?:payment\s+)?(?:fees?|charges?|penalt(?:y|ies))\b",
            r"\bpenalty\s+fees?\b",
            r"\b(?:cancellation|early\s+termination)\s+(?:fees?|charges?|penalt(?:y|ies))\b",
            r"\binterest\s+on\s+(?:any\s+)?(?:late|overdue)\s+(?:payments?|amounts?)\b",
        ),
        exclusions=(
            r"\bno\s+(?:late|penalty|cancellation|early\s+termination)\s+"
            r"(?:payment\s+)?(?:fee|charge|penalt)",
            r"\bwaive[sd]?\s+(?:all\s+|any\s+)?(?:late|cancellation|early\s+termination)\s+"
            r"(?:fees?|charges?)",
            r"\bwithout\s+(?:any\s+)?(?:penalty|cancellation)\s+fees?",
        ),
        description=(
            'Late fees or penalties ("{match}") may apply for late payment '
            "or early termination."
        ),
        recommendation="Understand every fee, how much it is, and when it applies.",
        concept="late fee",
    ),
    RiskPattern(
        id="variable-pricing",
        name="Variable Pricing",
        category=RiskCategory.FINANCIAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\b(?:prices?|pricing|fees?|rates?|charges?|rent)\s+(?:are\s+|is\s+)?"
            r"subject\s+to\s+change\b",
            r"\b(?:prices?|pricing|fees?|charges?|rent)\s+may\s+(?:be\s+)?"
            r"(?:increased?|raised|changed|adjusted)\b",
            r"\bmay\s+(?:increase|raise|change|adjust)\s+(?:the\s+)?"
            r"(?:prices?|pricing|fees?|charges?|rent)\b",
        ),
        exclusions=(r"\b(?:not|never)\s+(?:be\s+)?subject\s+to\s+change",),
        description='Pricing may change during the term ("{match}").',
        recommendation="Ask how and when prices can change and seek a cap on increases.",
        concept="pric chang",
    ),
    RiskPattern(
        id="variable-interest-rate",
        name="Variable Interest Rate",
        category=RiskCategory.FINANCIAL,
        severity=Severity.HIGH,
        triggers=(
            r"\b(?:variable|adjustable|floating)[\s-]+(?:interest\s+)?rates?\b",
            r"\binterest\s+rate\s+(?:may|will|shall)\s+(?:be\s+)?"
            r"(?:adjust(?:ed)?|increase[ds]?|change[ds]?|var(?:y|ied)|reset)\b",
        ),
        exclusions=(
            r"\b(?:not|never)\s+(?:a\s+|be\s+)?(?:subject\s+to\s+(?:a\s+)?)?"
            r"(?:variable|adjustable|floating)",
        ),
        description=(
            'Variable interest rate ("{match}") can significantly increase '
            "your payment obligations."
        ),
        recommendation=(
            "Understand how the rate adjusts and consider a fixed-rate alternative."
        ),
        document_types=_CREDIT,
        concept="interest rate",
    ),
    RiskPattern(
        id="prepayment-penalty",
        name="Prepayment Penalty",
        category=RiskCategory.FINANCIAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\bprepayment\s+(?:penalt(?:y|ies)|fees?|charges?|premiums?)\b",
            r"\bearly\s+(?:re)?payment\s+(?:penalt(?:y|ies)|fees?|charges?)\b",
        ),
        exclusions=_PREPAYMENT_EXCLUSIONS,
        description='Prepayment penalty ("{match}") restricts paying off the loan early.',
        recommendation="Negotiate removal of prepayment penalties if possible.",
        document_types=_LOAN,
        concept="prepayment",
    ),
    RiskPattern(
        id="joint-several-liability",
        name="Joint and Several Liability",
        category=RiskCategory.FINANCIAL,
        severity=Severity.HIGH,
        triggers=(r"\bjoint(?:ly)?\s+and\s+several(?:ly)?\b",),
        exclusions=(r"\bnot\s+(?:be\s+)?joint(?:ly)?\s+and\s+several",),
        description=(
            'Joint and several liability ("{match}"): each party can be held '
            "responsible for the full amount owed, not just their share."
        ),
        recommendation=(
            "Understand that you could be liable for the other parties' unpaid share."
        ),
        document_types=_SHARED_OBLIGATION,
        concept="joint sever",
    ),
    RiskPattern(
        id="cross-default",
        name="Cross-Default",
        category=RiskCategory.FINANCIAL,
        severity=Severity.HIGH,
        triggers=(
            r"\bcross[\s-]default\b",
            r"\bdefault\s+under\s+(?:any\s+)?other\s+"
            r"(?:agreements?|loans?|obligations?|indebtedness)\b",
        ),
        description=(
            'Cross-default provision ("{match}"): a default on other debts can '
            "trigger a default on this loan."
        ),
        recommendation="Check how your other financial obligations could affect this loan.",
        document_types=_LOAN,
        concept="cross default",
    ),
    RiskPattern(
        id="personal-guarantee",
        name="Personal Guarantee",
        category=RiskCategory.FINANCIAL,
        severity=Severity.HIGH,
        triggers=(
            r"\bpersonal(?:ly)?\s+guarant(?:ee|y|ees|eed)\b",
            r"\bunconditionally\s+guarantees?\b",
        ),
        exclusions=(r"\b(?:no|without\s+(?:a\s+)?)\s*personal\s+guarant",),
        description='Personal guarantee ("{match}"): your personal assets may be exposed.',
        recommendation="Limit the guarantee in amount and duration, or remove it.",
        concept="personal guarant",
    ),
    RiskPattern(
        id="forfeiture",
        name="Forfeiture and Non-Refundable Payments",
        category=RiskCategory.FINANCIAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\bnon-?refundable\b",
            r"\bno\s+refunds?\b",
            r"\bforfeit(?:s|ed|ure)?\b",
        ),
        exclusions=(r"\b(?:not|never)\s+(?:be\s+)?forfeit",),
        description=(
            'Forfeiture or non-refundable payment ("{match}"): money paid '
            "may not be returned."
        ),
        recommendation="Clarify when payments or deposits can be kept and ask for refund terms.",
        concept="forfeit",
    ),
    # Legal
    RiskPattern(
        id="broad-indemnification",
        name="Broad Indemnification",
        category=RiskCategory.LEGAL,
        severity=Severity.HIGH,
        triggers=(
            r"\bindemnify,?\s+(?:defend,?\s+)?(?:and\s+)?hold\s+(?:\w+\s+){0,3}harmless\b",
            r"\bdefend,?\s+(?:and\s+)?indemnify\b",
            r"\b(?:shall|will|must|agrees?\s+to)\s+(?:fully\s+)?indemnify\b",
            r"\bhold\s+(?:\w+\s+){0,3}harmless\b",
        ),
        exclusions=_INDEMNITY_EXCLUSIONS,
        description=(
            'Broad indemnification ("{match}"): you may have to cover legal '
            "costs and damages for the other party."
        ),
        recommendation=(
            "Limit indemnification scope and exclude gross negligence or willful misconduct."
        ),
        concept="indemnif",
    ),
    RiskPattern(
        id="binding-arbitration",
        name="Binding Arbitration",
        category=RiskCategory.LEGAL,
        severity=Severity.HIGH,
        triggers=(
            r"\b(?:binding|mandatory|compulsory)\s+(?:individual\s+)?arbitration\b",
            r"\bwaives?\s+(?:\w+\s+){0,3}right\s+to\s+(?:a\s+)?(?:jury\s+)?trial\b",
            r"\bdisputes?\s+(?:\w+\s+){0,4}(?:shall|will|must)\s+be\s+"
            r"(?:resolved|settled|determined)\s+(?:exclusively\s+|solely\s+)?"
            r"(?:by|through)\s+(?:final\s+and\s+binding\s+)?arbitration\b",
        ),
        exclusions=(
            r"\bnon[\s-]?binding\s+arbitration\b",
            r"\b(?:not|never)\s+(?:be\s+)?(?:required|subject)\s+to\s+"
            r"(?:binding\s+|mandatory\s+)?arbitration",
        ),
        description=(
            'Binding arbitration ("{match}"): disputes must go to arbitration '
            "instead of court."
        ),
        recommendation=(
            "Understand the arbitration process and whether you are comfortable "
            "waiving court rights."
        ),
        concept="arbitrat",
    ),
    RiskPattern(
        id="class-action-waiver",
        name="Class Action Waiver",
        category=RiskCategory.LEGAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\bclass[\s-]action\s+waiver\b",
            r"\bwaive\w*\s+(?:\w+\s+){0,3}(?:right\s+to\s+)?"
            r"(?:participate\s+in\s+|bring\s+|join\s+)?(?:a\s+)?class[\s-]action",
            r"\bindividual\s+basis\s+(?:only|and\s+not\s+(?:as\s+a\s+)?(?:class|collective))",
            r"\bnot\s+as\s+a\s+(?:plaintiff|class\s+member)\s+in\s+any\s+(?:purported\s+)?class",
        ),
        description=(
            'Class action waiver ("{match}"): you cannot join class or collective actions.'
        ),
        recommendation="Consider whether individual proceedings are adequate for likely disputes.",
        concept="class action",
    ),
    RiskPattern(
        id="unilateral-modification",
        name="Unilateral Modification Rights",
        category=RiskCategory.LEGAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\b(?:modify|change|amend|update|revise)\s+(?:these\s+terms|this\s+agreement|"
            r"the\s+terms|this\s+policy|these\s+conditions)\s+(?:\w+\s+){0,4}at\s+any\s+time\b",
            r"\bat\s+any\s+time\s+(?:\w+\s+){0,3}(?:modify|change|amend|update|revise)\s+"
            r"(?:these|the|this)\s+(?:terms|agreement|policy|conditions)\b",
            r"\breserves?\s+the\s+right\s+to\s+(?:modify|change|amend|update|revise)\b",
            r"\bunilateral(?:ly)?\s+(?:right\s+to\s+)?(?:modify|change|amend)\b",
            r"\bmodify\s+at\s+any\s+time\b",
        ),
        exclusions=(
            r"\bonly\s+(?:by|in|with)\s+(?:a\s+)?(?:written\s+)?"
            r"(?:instrument|agreement|amendment|writing)\s+signed\s+by\s+(?:both|all|each)",
            r"\bmutual(?:ly)?\s+(?:written\s+)?(?:agree|consent)",
        ),
        description=(
            'Unilateral modification ("{match}"): terms can change without your agreement.'
        ),
        recommendation="Ensure you receive notice of changes and can terminate if terms change.",
        concept="unilateral modif",
    ),
    RiskPattern(
        id="unilateral-termination",
        name="Unilateral Termination",
        category=RiskCategory.LEGAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\b(?:may|can|reserves?\s+the\s+right\s+to)\s+terminate\s+"
            r"(?:this\s+(?:agreement|lease|contract)\s+|your\s+(?:account|access)\s+)?"
            r"(?:at\s+any\s+time\s+)?(?:without\s+(?:cause|notice|reason)|for\s+convenience|"
            r"for\s+any\s+reason|(?:in|at)\s+(?:its|our)\s+sole\s+discretion)",
        ),
        exclusions=(r"\b(?:either|each)\s+party\s+may\s+terminate", r"\bboth\s+parties\s+may\b"),
        description=(
            'Unilateral termination ("{match}"): the other side may end the '
            "arrangement without cause."
        ),
        recommendation="Make termination rights mutual or negotiate an adequate notice period.",
        concept="unilateral terminat",
    ),
    RiskPattern(
        id="broad-ip-assignment",
        name="Broad IP Assignment",
        category=RiskCategory.LEGAL,
        severity=Severity.HIGH,
        triggers=(
            r"\bhereby\s+(?:irrevocably\s+)?assigns?\s+(?:\w+\s+){0,3}all\s+"
            r"(?:rights?|right,\s+title|intellectual\s+property)",
            r"\ball\s+intellectual\s+property\s+(?:\w+\s+){0,6}(?:shall\s+)?"
            r"(?:belong|vest|be\s+owned|become\s+the\s+(?:sole\s+)?property)",
        ),
        exclusions=(
            r"\blimited\s+to\b",
            r"\bsolely\s+(?:for|to)\b",
            r"\barising\s+(?:from|under)\s+this\b",
        ),
        description=(
            'Broad intellectual property assignment ("{match}") without a clear '
            "scope limitation."
        ),
        recommendation=(
            "Limit the assignment to work product created specifically under this agreement."
        ),
        document_types=_CONTRACT,
        concept="intellectual property",
    ),
    # Privacy
    RiskPattern(
        id="third-party-data-sharing",
        name="Third-Party Data Sharing",
        category=RiskCategory.PRIVACY,
        severity=Severity.HIGH,
        triggers=(
            r"\b(?:share|sell|rent|disclose|transfer|provide)s?\s+(?:\w+\s+){0,4}"
            r"(?:data|information)\s+(?:\w+\s+){0,2}(?:with|to)\s+(?:\w+\s+){0,2}"
            r"(?:third[\s-]part(?:y|ies)|partners|advertisers|affiliates|marketers|data\s+brokers)\b",
            r"\b(?:data|information)\s+(?:\w+\s+){0,3}(?:shared|sold|disclosed|transferred|provided)\s+"
            r"(?:with|to)\s+(?:\w+\s+){0,2}"
            r"(?:third[\s-]part(?:y|ies)|partners|advertisers|affiliates|marketers|data\s+brokers)\b",
            r"\bsell\s+(?:your\s+)?(?:personal\s+)?(?:data|information)\b",
            r"\bshare\s+with\s+third[\s-]parties\b",
        ),
        exclusions=_DATA_SHARING_EXCLUSIONS,
        description=(
            'Third-party data sharing ("{match}"): your personal data may be '
            "shared with or sold to other companies."
        ),
        recommendation="Find out who receives your data and opt out where possible.",
        concept="third part",
    ),
    RiskPattern(
        id="broad-data-collection",
        name="Broad Data Collection",
        category=RiskCategory.PRIVACY,
        severity=Severity.MEDIUM,
        triggers=(
            r"\bcollect\w*\s+(?:all|any)\s+(?:\w+\s+){0,2}(?:data|information)\b",
            r"\bcollect\w*\s+(?:\w+\s+){0,3}(?:precise\s+)?"
            r"(?:location|biometric|browsing\s+history|contacts|health)\b",
            r"\b(?:may|can|will)\s+access\s+(?:all\s+(?:of\s+)?)?your\s+(?:private|personal)\s+"
            r"(?:data|information|files|messages|communications)\b",
            r"\bcollect\s+personal\s+information\b",
        ),
        exclusions=(
            r"\b(?:cannot|can\s*not|will\s+not|won't|may\s+not|do\s+not|does\s+not|don't|never)\s+"
            r"(?:\w+\s+){0,2}(?:collect|access)",
        ),
        description='Broad data collection ("{match}") may go beyond what is needed.',
        recommendation="Review which data is collected and why it is needed.",
        concept="data collect",
    ),
    RiskPattern(
        id="indefinite-retention",
        name="Indefinite Data Retention",
        category=RiskCategory.PRIVACY,
        severity=Severity.MEDIUM,
        triggers=(
            r"\bretain\w*\s+(?:\w+\s+){0,4}indefinitely\b",
            r"\b(?:keep|kept|store[sd]?)\s+(?:\w+\s+){0,4}(?:forever|indefinitely|permanently)\b",
            r"\bno\s+(?:obligation\s+to\s+)?delet(?:e|ion)\b",
            r"\bfor\s+as\s+long\s+as\s+(?:we|it)\s+(?:deem\w*|see\s+fit|wish|want|choose)\b",
        ),
        exclusions=(r"\b(?:not|never)\s+(?:\w+\s+){0,2}(?:retain|keep|store)",),
        description=(
            'Indefinite data retention ("{match}"): your data may be kept '
            "without deletion rights."
        ),
        recommendation="Ask for deletion rights and a reasonable retention period.",
        concept="indefinit",
    ),
    # Operational
    RiskPattern(
        id="exclusive-dealing",
        name="Exclusive Dealing",
        category=RiskCategory.OPERATIONAL,
        severity=Severity.MEDIUM,
        triggers=(
            r"\b(?:sole\s+and\s+exclusive|exclusive)\s+(?:provider|supplier|vendor|distributor)\b",
            r"\b(?:shall|will|may)\s+not\s+(?:use|engage|purchase\s+from|contract\s+with)\s+"
            r"(?:any\s+)?compet\w*",
            r"\bexclusive(?:ly)?\s+(?:dealing|supply|purchasing)\b",
            r"\bcannot\s+use\s+competitors\b",
        ),
        description='Exclusive dealing ("{match}") may stop you from using competing providers.',
        recommendation="Check whether the exclusivity restrictions are reasonable for your needs.",
        concept="exclusiv",
    ),
    RiskPattern(
        id="use-restrictions",
        name="Broad Use Restrictions",
        category=RiskCategory.OPERATIONAL,
        severity=Severity.LOW,
        triggers=(
            r"\bprohibited\s+uses?\b",
            r"\brestricted\s+activities\b",
            r"\bmay\s+not\s+use\s+(?:the\s+)?(?:service|software|product|premises)\s+for\s+any\b",
        ),
        description='Use restrictions ("{match}") limit how you may use the service or property.',
        recommendation="Make sure the restrictions do not interfere with your intended use.",
        concept="use restrict",
    ),
    RiskPattern(
        id="compliance-obligations",
        name="Compliance Obligations",
        category=RiskCategory.OPERATIONAL,
        severity=Severity.LOW,
        triggers=(
            r"\bcomply\s+with\s+all\s+(?:applicable\s+)?(?:laws|regulations|rules)\b",
            r"\bregulatory\s+compliance\b",
            r"\bcertifications?\s+(?:is\s+|are\s+)?required\b",
        ),
        description='Compliance obligations ("{match}") may carry ongoing cost.',
        recommendation="Understand every compliance requirement and what it will cost.",
        concept="complian",
    ),
)


# ---------------------------------------------------------------------------
# Clause-only patterns
# ---------------------------------------------------------------------------

CLAUSE_PATTERNS: tuple[RiskPattern, ...] = (
    RiskPattern(
        id="time-sensitive-obligation",
        name="Time-Sensitive Obligation",
        category=RiskCategory.OPERATIONAL,
        severity=Severity.LOW,
        triggers=(
            r"\bwithin\s+\d+\s+(?:business\s+|calendar\s+)?days\b",
            r"\bwithin\s+\w+\s+\(\d+\)\s+(?:business\s+|calendar\s+)?days\b",
            r"\bno\s+later\s+than\b",
            r"\bimmediately\b",
        ),
        description='Time-sensitive obligation ("{match}") requires prompt action.',
        recommendation="Note every deadline and set reminders to stay compliant.",
        concept="time sensitiv",
    ),
)


# ---------------------------------------------------------------------------
# Document-type contextual checks
# ---------------------------------------------------------------------------

CONTEXTUAL_PATTERNS: dict[DocumentType, tuple[RiskPattern, ...]] = {
    DocumentType.LEASE: (
        RiskPattern(
            id="lease-automatic-renewal",
            name="Lease Automatic Renewal",
            category=RiskCategory.LEGAL,
            severity=Severity.MEDIUM,
            triggers=_AUTO_RENEWAL_TRIGGERS,
            exclusions=_AUTO_RENEWAL_EXCLUSIONS,
            description="Automatic renewal clause may lock you into extended lease terms.",
            recommendation="Review renewal terms and make sure you can opt out with proper notice.",
            document_types=_LEASE,
            concept="auto renew",
        ),
        RiskPattern(
            id="lease-joint-liability",
            name="Joint Tenant Liability",
            category=RiskCategory.FINANCIAL,
            severity=Severity.HIGH,
            triggers=(r"\bjoint(?:ly)?\s+and\s+several(?:ly)?\b",),
            exclusions=(r"\bnot\s+(?:be\s+)?joint(?:ly)?\s+and\s+several",),
            description=(
                "Joint and several liability: each tenant is responsible for the "
                "full rent, not just their share."
            ),
            recommendation="Understand that you could be liable for roommates' unpaid rent.",
            document_types=_LEASE,
            concept="joint sever",
        ),
        RiskPattern(
            id="lease-missing-security-deposit",
            name="Security Deposit",
            category=RiskCategory.FINANCIAL,
            severity=Severity.MEDIUM,
            triggers=(r"\bdeposits?\b",),
            match_mode=MatchMode.ABSENT,
            description="No mention of security deposit terms, which could lead to disputes.",
            recommendation="Make sure security deposit terms are clearly defined before signing.",
            document_types=_LEASE,
            concept="security deposit",
        ),
    ),
    DocumentType.LOAN_AGREEMENT: (
        RiskPattern(
            id="loan-variable-rate",
            name="Loan Variable Rate",
            category=RiskCategory.FINANCIAL,
            severity=Severity.HIGH,
            triggers=(r"\bvariable\s+rate\b", r"\badjustable\s+rate\b"),
            exclusions=(r"\b(?:not|never)\s+(?:a\s+)?(?:variable|adjustable)",),
            description=(
                "Variable or adjustable interest rate can significantly increase "
                "your payment obligations."
            ),
            recommendation=(
                "Understand rate adjustment terms and consider fixed-rate alternatives."
            ),
            document_types=_LOAN,
            concept="interest rate",
        ),
        RiskPattern(
            id="loan-prepayment-penalty",
            name="Loan Prepayment Penalty",
            category=RiskCategory.FINANCIAL,
            severity=Severity.MEDIUM,
            triggers=(r"\bprepayment\s+penalt(?:y|ies)\b", r"\bearly\s+payment\s+fees?\b"),
            exclusions=_PREPAYMENT_EXCLUSIONS,
            description=(
                "Prepayment penalties restrict your ability to pay off the loan early."
            ),
            recommendation="Negotiate removal of prepayment penalties if possible.",
            document_types=_LOAN,
            concept="prepayment",
        ),
    ),
    DocumentType.CONTRACT: (
        RiskPattern(
            id="contract-broad-indemnity",
            name="Contract Indemnity",
            category=RiskCategory.LEGAL,
            severity=Severity.HIGH,
            triggers=(r"\bindemnif(?:y|ies)\b", r"\bhold\s+(?:\w+\s+){0,3}harmless\b"),
            match_mode=MatchMode.ALL,
            exclusions=_INDEMNITY_EXCLUSIONS,
            description=(
                "Broad indemnification clause may make you liable for third-party claims."
            ),
            recommendation=(
                "Limit indemnification to specific scenarios and exclude gross negligence."
            ),
            document_types=_CONTRACT,
            concept="indemnif",
        ),
    ),
    DocumentType.TERMS_OF_SERVICE: (
        RiskPattern(
            id="tos-unilateral-modification",
            name="Terms Changes",
            category=RiskCategory.LEGAL,
            severity=Severity.MEDIUM,
            triggers=(r"\bmodify\s+(?:these|the)\s+terms\b", r"\bat\s+any\s+time\b"),
            match_mode=MatchMode.ALL,
            description="Service provider can change these terms at any time without your consent.",
            recommendation=(
                "Look for notification requirements and your right to terminate if terms change."
            ),
            document_types=frozenset({DocumentType.TERMS_OF_SERVICE}),
            concept="unilateral modif",
        ),
    ),
    DocumentType.PRIVACY_POLICY: (
        RiskPattern(
            id="privacy-data-sharing",
            name="Data Shared With Third Parties",
            category=RiskCategory.PRIVACY,
            severity=Severity.MEDIUM,
            triggers=(r"\bshar(?:e|es|ed|ing)\b", r"\bthird[\s-]part(?:y|ies)\b"),
            match_mode=MatchMode.ALL,
            exclusions=_DATA_SHARING_EXCLUSIONS,
            description="Your personal data may be shared with third parties.",
            recommendation=(
                "Review what data is shared and with whom, and opt out if possible."
            ),
            document_types=frozenset({DocumentType.PRIVACY_POLICY}),
            concept="third part",
        ),
    ),
}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class PatternCatalog:
    """Immutable, versioned collection of risk patterns.

    Lookups are precomputed per document type at construction, so the
    catalog can be shared by any number of concurrent analyses.

    Example::

        catalog = PatternCatalog.default()
        for pattern in catalog.lookup_patterns("lease"):
            print(pattern.id, pattern.severity.value)

    Args:
        patterns: Document-level patterns in declaration order.
        clause_patterns: Patterns applied to scoped clauses only.
        contextual: Extra patterns per document type.
        version: Catalog version string.

    Raises:
        ValueError: If two patterns share an id.
    """

    def __init__(
        self,
        patterns: Iterable[RiskPattern],
        clause_patterns: Iterable[RiskPattern] = (),
        contextual: Mapping[DocumentType | str, Iterable[RiskPattern]] | None = None,
        version: str = CATALOG_VERSION,
    ) -> None:
        self._patterns = tuple(patterns)
        self._clause_patterns = tuple(clause_patterns)
        self._contextual = {
            DocumentType.parse(doc_type): tuple(checks)
            for doc_type, checks in (contextual or {}).items()
        }
        self._version = version

        every = list(self._patterns) + list(self._clause_patterns)
        for checks in self._contextual.values():
            every.extend(checks)
        self._by_id: dict[str, RiskPattern] = {}
        for pattern in every:
            if pattern.id in self._by_id:
                raise ValueError(f"Duplicate risk pattern id: {pattern.id}")
            self._by_id[pattern.id] = pattern

        self._by_type = {
            doc_type: tuple(p for p in self._patterns if p.applies_to(doc_type))
            for doc_type in DocumentType
        }

        concepts: list[tuple[str, ...]] = []
        for pattern in every:
            key = tuple(pattern.concept.split())
            if key and key not in concepts:
                concepts.append(key)
        self._concepts = tuple(concepts)

    @classmethod
    def default(cls) -> PatternCatalog:
        """Return the shared built-in catalog."""
        return DEFAULT_CATALOG

    @property
    def version(self) -> str:
        return self._version

    @property
    def patterns(self) -> tuple[RiskPattern, ...]:
        return self._patterns

    @property
    def clause_patterns(self) -> tuple[RiskPattern, ...]:
        return self._clause_patterns

    def lookup_patterns(self, document_type: DocumentType | str | None) -> tuple[RiskPattern, ...]:
        """Document-level patterns applicable to ``document_type``, in declaration order."""
        return self._by_type[DocumentType.parse(document_type)]

    def lookup_clause_patterns(
        self, document_type: DocumentType | str | None
    ) -> tuple[RiskPattern, ...]:
        """Patterns to run against a single clause."""
        return self.lookup_patterns(document_type) + self._clause_patterns

    def lookup_contextual(
        self, document_type: DocumentType | str | None
    ) -> tuple[RiskPattern, ...]:
        """Supplementary checks for one document type."""
        return self._contextual.get(DocumentType.parse(document_type), ())

    def get(self, pattern_id: str) -> RiskPattern | None:
        return self._by_id.get(pattern_id)

    def concepts(self) -> tuple[tuple[str, ...], ...]:
        """Distinct concept signatures as token-prefix tuples, in declaration order."""
        return self._concepts

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[RiskPattern]:
        return iter(self._by_id.values())


DEFAULT_CATALOG = PatternCatalog(
    patterns=DOCUMENT_PATTERNS,
    clause_patterns=CLAUSE_PATTERNS,
    contextual=CONTEXTUAL_PATTERNS,
)
