"""Keyword-matched canned replies for the student-finance chat widget."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

END_COMMANDS = {"end", "end conversation", "clear", "reset", "erase chat"}
CLEAR_CONFIRMATION = "Confirm ending the conversation and clearing all chat history."
MIN_DETAILED_LENGTH = 3

WELCOME_TEXT = (
    "Hi — I'm Finhub Assistant. Ask me about budgets, savings, or investing. "
    'Try: "How can I reduce my monthly expenses?"'
)
WELCOME_SUGGESTIONS = [
    "How can I reduce my monthly expenses?",
    "Show me a budget template",
    "Analyze my last month",
]


@dataclass(frozen=True)
class CannedReply:
    text: str
    more_info: str | None = None
    suggestions: list[str] = field(default_factory=list)
    action: str | None = None


@dataclass(frozen=True)
class CannedRule:
    name: str
    pattern: re.Pattern[str]
    reply: CannedReply


def _rule(name: str, pattern: str, text: str, more_info: str, suggestions: list[str]) -> CannedRule:
    return CannedRule(
        name=name,
        pattern=re.compile(pattern),
        reply=CannedReply(text=text, more_info=more_info, suggestions=suggestions),
    )


# Order matters: the first matching rule wins.
RULES: tuple[CannedRule, ...] = (
    _rule(
        "emergency_fund",
        r"emerg|emergency|fund",
        "Emergency funds are useful even for students. Aim for at least 1 month of expenses "
        "while in school and 3+ months if you have steady bills.",
        "Student emergency fund plan:\n"
        "1) List essential monthly costs (rent, food, transport, phone).\n"
        "2) Set a realistic mini-target (e.g., 1 month = $500-$1,500).\n"
        "3) Save small automatic amounts (e.g., $25/week).\n"
        "4) Use a high-yield savings or campus bank account to hold it.",
        ["Set a monthly savings goal", "Give me a budget template"],
    ),
    _rule(
        "budgeting",
        r"budget|50/30/20|zero-based|envelope|student budget|monthly budget|budgeting",
        "For students, simple budgets work best: try a monthly or weekly plan that fits "
        "irregular income (allowance, part-time pay, or gig work).",
        "Student sample monthly budget (example):\n"
        "- Income (part-time + allowance): $800\n"
        "- Rent/share: $300 (with roommate)\n"
        "- Food/meal plan: $150\n"
        "- Transport: $40\n"
        "- Textbooks/supplies: $50\n"
        "- Savings/emergency: $100\n"
        "- Fun/entertainment: $60\n\n"
        "Tips: use the envelope method or a simple app, automate $25-$50/week to savings, "
        "and track textbook costs early (buy used or share PDFs).",
        ["Generate a 30-day budget", "Analyze last month's spending", "Show me saving tips"],
    ),
    _rule(
        "saving",
        r"save|savings|student discount|textbook|scholarship|sinking",
        "Students can save by leveraging discounts, buying used textbooks, and using campus "
        "resources like food banks and discounted transport.",
        "Student savings ideas:\n"
        "- Always check for student discounts (software, subscriptions, transport).\n"
        "- Buy used textbooks or rent them; sell back at semester end.\n"
        "- Use campus meal plans strategically and cook in bulk with roommates.\n"
        "- Create sinking funds for big semester costs (tuition, laptop, travel).\n"
        "- Apply for scholarships, grants, and emergency funds offered by your institution.",
        ["Show me recurring subscriptions", "Set a monthly savings goal"],
    ),
    _rule(
        "work",
        r"intern|part-?time|gig|freelance|side job|work",
        "Part-time jobs and internships are great for income and experience. Prioritize roles "
        "that build skills related to your studies when possible.",
        "Balancing work and study:\n"
        "- Try on-campus jobs (flexible hours).\n"
        "- Use paid internships to build skills and network.\n"
        "- Freelance or tutoring can be high-pay for flexible schedules.\n"
        "- Track taxes and keep receipts for any deductible expenses.",
        ["Give me a budget template", "Show me saving tips"],
    ),
    _rule(
        "student_loans",
        r"student loan|student loans|student debt|loan|defer|forbearance",
        "Student loans are common; understand interest, your grace period, and repayment "
        "options before graduating.",
        "Student loan checklist:\n"
        "- Know your lender and interest rate.\n"
        "- Check grace periods and when repayment starts.\n"
        "- Consider income-driven repayment plans if needed.\n"
        "- Pay small amounts during school if possible to reduce interest.\n"
        "- Look into loan forgiveness programs and refinancing after graduation.",
        ["Build credit as a student", "Generate a 30-day budget"],
    ),
    _rule(
        "credit",
        r"credit score|credit card|build credit|credit",
        "Building credit as a student helps later. Consider a student credit card or becoming "
        "an authorized user with a responsible family member.",
        "Credit tips for students:\n"
        "- Use a student-friendly card with low limit and pay in full each month.\n"
        "- Keep utilization low (<30%).\n"
        "- Avoid cash advances and high-interest debt.\n"
        "- Check credit reports for errors once a year.",
        ["Student loan checklist", "Show me saving tips"],
    ),
    _rule(
        "scholarships",
        r"scholarship|grant|financial aid|fafsa|aid",
        "Search for scholarships by major, community, and extracurriculars; many small "
        "scholarships add up.",
        "Scholarship search tips:\n"
        "- Use your school portal and scholarship databases.\n"
        "- Apply to multiple small awards; tailor essays to each.\n"
        "- Meet deadlines and keep a list of requirements.\n"
        "- Check departmental scholarships and work-study options.",
        ["Part-time jobs for students", "Student loan checklist"],
    ),
    _rule(
        "investing",
        r"invest|investment|etf|stock|dividend|index",
        "If you have extra savings, consider starting small with low-cost index funds or ETFs. "
        "Your time horizon is your biggest advantage.",
        "Student investor tips:\n"
        "- Start with small, regular contributions (even $25/month).\n"
        "- Consider tax-advantaged accounts when available.\n"
        "- Learn about fees; prefer low-cost index funds.\n"
        "- Treat it as long-term; avoid frequent trading.",
        ["Risk tolerance quiz", "Recommended ETFs", "Estimate returns"],
    ),
)

SHORT_INPUT_REPLY = CannedReply(
    text="Please provide more details. For example: 'How do I start a student budget' "
    "or 'Best ways to save on textbooks'",
)

GENERAL_REPLY = CannedReply(
    text="I can help with student budgets, scholarships, part-time work, loans, and everyday "
    "student savings tips. Pick an area for a quick guide.",
    more_info="Student topics available:\n"
    "- Budgeting for students (sample budgets)\n"
    "- Emergency funds while in school\n"
    "- Saving on textbooks & meal costs\n"
    "- Part-time jobs and internships\n"
    "- Student loans & repayment options\n"
    "- Building credit safely as a student\n\n"
    'Reply with a topic name (e.g., "textbooks") or ask for a short student-focused guide.',
    suggestions=["Student budget", "Emergency fund", "Textbooks"],
)

CLEAR_REPLY = CannedReply(text=CLEAR_CONFIRMATION, action="clear")


def is_end_command(message: str) -> bool:
    return message.strip().lower() in END_COMMANDS


def match_rule(message: str) -> CannedRule | None:
    lowered = (message or "").lower()
    for rule in RULES:
        if rule.pattern.search(lowered):
            return rule
    return None


def canned_reply(message: str) -> CannedReply:
    """
    Pick the canned reply for one user message.

    End commands ask for a clear confirmation; otherwise the first matching
    rule wins, then very short input asks for detail, then the general reply.
    """
    if is_end_command(message):
        return CLEAR_REPLY

    rule = match_rule(message)
    if rule is not None:
        return rule.reply

    if len((message or "").strip()) < MIN_DETAILED_LENGTH:
        return SHORT_INPUT_REPLY
    return GENERAL_REPLY
