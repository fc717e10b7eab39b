"""
Prompt builders for report insights, one per focus area.

Each builder embeds only the slice of ReportData its focus area needs.
Lines for absent metrics are left out rather than filled with placeholders.
"""
from typing import Optional

from jobtracker.reporting.schemas import ConversionRate, ReportData

# Interview-conversion thresholds (percent) used to label performance in prompts.
INTERVIEW_RATE_LOW = 10.0
INTERVIEW_RATE_HIGH = 20.0
OFFER_RATE_LOW = 5.0
OFFER_RATE_HIGH = 15.0


def _rate(rate: Optional[ConversionRate]) -> float:
    return rate.rate if rate is not None else 0.0


def rate_label(rate: float, low: float, high: float) -> str:
    """Qualitative label for a conversion rate."""
    if rate < low:
        return "(Below average)"
    if rate > high:
        return "(Above average)"
    return "(Average)"


def build_trends_prompt(data: ReportData) -> str:
    lines = [
        "You are a job search career coach analyzing job application data. "
        "Based on the following report data, identify and explain key trends:",
        "",
        "Report Summary:",
        f"- Total Applications: {data.total_applications or 0}",
        f"- Interview Conversion Rate: {_rate(data.interview_conversion_rate)}%",
        f"- Offer Conversion Rate: {_rate(data.offer_conversion_rate)}%",
    ]
    if data.application_trend:
        recent = ", ".join(f"{p.period}: {p.count}" for p in data.application_trend[-4:])
        lines.append(f"- Application Activity: {recent}")
    if data.top_industries:
        industries = ", ".join(f"{i.industry} ({i.count})" for i in data.top_industries[:5])
        lines += ["", f"Top Industries: {industries}"]
    if data.top_companies:
        companies = ", ".join(f"{c.company} ({c.count})" for c in data.top_companies[:5])
        lines += ["", f"Top Companies: {companies}"]
    lines += [
        "",
        "Analyze the trends in this job search data. Focus on:",
        "1. Application activity patterns",
        "2. Industry focus trends",
        "3. Conversion rate trends",
        "4. Any notable patterns",
        "",
        "Provide a concise 3-4 sentence analysis of the key trends.",
    ]
    return "\n".join(lines)


def build_recommendations_prompt(data: ReportData) -> str:
    lines = [
        "You are a job search strategist. Based on this job application data, "
        "provide 3-5 strategic recommendations:",
        "",
        "Application Data:",
        f"- Total Applications: {data.total_applications or 0}",
        f"- Interview Rate: {_rate(data.interview_conversion_rate)}%",
        f"- Offer Rate: {_rate(data.offer_conversion_rate)}%",
    ]
    if data.average_response_time is not None:
        lines.append(f"- Avg Response Time: {data.average_response_time.average_days} days")
    if data.ghosted_applications is not None:
        lines.append(f"- Ghosted Applications: {data.ghosted_applications}")
    if data.applications_by_status:
        breakdown = ", ".join(f"{s.status}: {s.count}" for s in data.applications_by_status)
        lines += ["", f"Status Breakdown: {breakdown}"]
    if data.top_industries:
        lines += ["", f"Industries: {', '.join(i.industry for i in data.top_industries[:3])}"]
    lines += [
        "",
        "Provide 3-5 actionable, specific recommendations to improve job search effectiveness. "
        "Focus on areas like application strategy, follow-up timing, industry targeting, or "
        "interview preparation. Keep each recommendation to 1-2 sentences.",
    ]
    return "\n".join(lines)


def build_strengths_prompt(data: ReportData) -> str:
    interview = data.interview_conversion_rate
    offer = data.offer_conversion_rate
    lines = [
        "You are analyzing job search performance. Identify 2-3 key strengths based on this data:",
        "",
        "Performance Metrics:",
        f"- Total Applications: {data.total_applications or 0}",
        f"- Interview Rate: {_rate(interview)}% ({interview.converted if interview else 0} interviews)",
        f"- Offer Rate: {_rate(offer)}% ({offer.converted if offer else 0} offers)",
    ]
    if data.top_industries:
        strong = ", ".join(f"{i.industry} ({i.count} apps)" for i in data.top_industries[:3])
        lines += ["", f"Strong Industries: {strong}"]
    lines += [
        "",
        "Identify specific strengths in this job search approach. What is working well? "
        "Be specific and encouraging. 2-3 sentences total.",
    ]
    return "\n".join(lines)


def build_improvements_prompt(data: ReportData) -> str:
    interview_rate = _rate(data.interview_conversion_rate)
    offer_rate = _rate(data.offer_conversion_rate)
    lines = [
        "You are a job search coach. Based on this performance data, "
        "suggest 2-3 specific areas for improvement:",
        "",
        "Current Performance:",
        f"- Applications: {data.total_applications or 0}",
        f"- Interview Conversion: {interview_rate}% "
        f"{rate_label(interview_rate, INTERVIEW_RATE_LOW, INTERVIEW_RATE_HIGH)}",
        f"- Offer Conversion: {offer_rate}% {rate_label(offer_rate, OFFER_RATE_LOW, OFFER_RATE_HIGH)}",
    ]
    if data.ghosted_applications:
        lines.append(f"- Ghosted: {data.ghosted_applications}")
    if data.average_response_time is not None:
        lines.append(f"- Avg Response: {data.average_response_time.average_days} days")
    lines += [
        "",
        "Suggest 2-3 specific, actionable improvements. Focus on concrete steps they can take. "
        "Keep it concise and constructive.",
    ]
    return "\n".join(lines)


def build_patterns_prompt(data: ReportData) -> str:
    lines = [
        "You are analyzing job search patterns. Identify interesting patterns or correlations in this data:",
        "",
        "Data Summary:",
    ]
    if data.applications_by_status:
        distribution = ", ".join(f"{s.status} {s.percentage}%" for s in data.applications_by_status)
        lines.append(f"Status Distribution: {distribution}")
    if data.applications_by_industry:
        industries = ", ".join(
            f"{i.industry} {i.percentage}%" for i in data.applications_by_industry[:5]
        )
        lines.append(f"Industry Distribution: {industries}")
    if data.application_trend:
        recent = ", ".join(f"{p.period}: {p.count}" for p in data.application_trend[-4:])
        lines.append(f"Recent Activity: {recent}")
    lines += [
        "",
        "Identify 1-2 interesting patterns, correlations, or insights that might not be "
        "immediately obvious. Be specific and data-driven. 2-3 sentences.",
    ]
    return "\n".join(lines)
