"""Render an OrganizationResult as a JSON plan document and a Markdown report."""

from datetime import datetime
from typing import Any
from unifi_netmgr.models.organization import OrganizationResult


def build_plan_document(result: OrganizationResult) -> dict[str, Any]:
    """Machine-readable plan, grouped by category.

    Returns:
        Dictionary with metadata, summary, organized (per category),
        unclassified and rejected sections; JSON serialisable
    """
    summary = result.summary
    return {
        'metadata': {
            'generated_at': result.generated_at,
            'applied': result.applied,
            'total_devices': summary.total_clients,
            'auto_classified': summary.auto_classified,
            'needs_review': summary.needs_review,
            'rejected': summary.rejected,
        },
        'summary': {
            'by_category': summary.by_category,
            'by_connection_type': summary.by_connection_type,
            'by_manufacturer': summary.by_manufacturer,
            'allocation_failures': summary.allocation_failures,
            'commit_failures': summary.commit_failures,
            'partial_failure': summary.partial_failure,
        },
        'organized': {
            category: [entry.model_dump(mode='json') for entry in entries]
            for category, entries in result.by_category().items()
        },
        'unclassified': [
            {
                'name': entry.client.display_name,
                'mac': entry.client.mac,
                'current_ip': entry.client.ip,
                'manufacturer': entry.manufacturer,
                'connection': entry.connection,
                'guess': entry.guess,
                'suggestion': entry.suggestion,
                'reason': entry.reason,
                'category': entry.category,
                'error': entry.error,
            }
            for entry in result.unclassified
        ],
        'rejected': [entry.model_dump(mode='json') for entry in result.rejected],
    }


def _cell(value: Any) -> str:
    if value is None or value == '':
        return '-'
    return str(value).replace('|', '\\|')


def render_markdown(result: OrganizationResult, rules_hint: str | None = None) -> str:
    """Narrative organisation plan for humans.

    Args:
        result: Organisation result
        rules_hint: Path of the rule file to mention in the "How to Classify" section
    """
    summary = result.summary
    generated = datetime.fromisoformat(result.generated_at).strftime('%Y-%m-%d %H:%M:%S %Z')

    lines = [
        '# IP Organization Plan',
        '',
        f'**Generated:** {generated}',
        '',
        f'**Total Devices:** {summary.total_clients}',
        f'**Auto-classified:** {summary.auto_classified}',
        f'**Needs Manual Classification:** {summary.needs_review}',
    ]
    if summary.rejected:
        lines.append(f'**Rejected Records:** {summary.rejected}')
    if result.applied:
        committed = summary.auto_classified - summary.commit_failures
        lines.append(f'**Reservations Committed:** {committed}')
        if summary.partial_failure:
            lines.append(f'**Reservation Failures:** {summary.commit_failures}')
    lines.append('')

    lines += [
        '## Summary',
        '',
        '| Connection | Devices |',
        '|------------|---------|',
        f'| Wired | {summary.by_connection_type.get("wired", 0)} |',
        f'| WiFi | {summary.by_connection_type.get("wireless", 0)} |',
        '',
    ]
    if summary.by_manufacturer:
        lines += ['| Manufacturer | Devices |', '|--------------|---------|']
        lines += [f'| {_cell(name)} | {count} |' for name, count in summary.by_manufacturer.items()]
        lines.append('')

    lines += ['## Organized Devices', '']
    for category, entries in result.by_category().items():
        lines += [
            f'### {category} ({len(entries)} devices)',
            '',
            '| Device | MAC | Current IP | New IP | Connection | Manufacturer |',
            '|--------|-----|------------|--------|------------|--------------|',
        ]
        for entry in entries:
            status = ' (failed)' if entry.commit_status == 'failed' else ''
            connection = entry.connection_type + (f' via {entry.uplink}' if entry.uplink else '')
            lines.append(
                f'| {_cell(entry.name)} | {entry.mac} | {_cell(entry.current_ip)} | '
                f'{entry.assigned_ip}{status} | {_cell(connection)} | {_cell(entry.manufacturer)} |'
            )
        lines.append('')

    failed = [e for e in result.organized if e.commit_status == 'failed']
    if failed:
        lines += ['## Reservation Failures', '']
        lines += [f'- {_cell(e.name)} ({e.mac} -> {e.assigned_ip}): {e.commit_error}' for e in failed]
        lines.append('')

    if result.unclassified:
        lines += [
            '## Unclassified Devices (Manual Review Required)',
            '',
            '| Device | MAC | Current IP | Manufacturer | Connection | Best Guess | Suggested Classification |',
            '|--------|-----|------------|--------------|------------|------------|--------------------------|',
        ]
        for entry in result.unclassified:
            suggestion = entry.suggestion
            if entry.reason == 'allocation_exhausted':
                suggestion = f'{entry.category} (range full)'
            lines.append(
                f'| {_cell(entry.client.name or entry.client.hostname or "Unknown")} | '
                f'{entry.client.mac} | {_cell(entry.client.ip)} | {_cell(entry.manufacturer)} | '
                f'{_cell(entry.connection)} | {_cell(entry.guess)} | {_cell(suggestion)} |'
            )
        lines += [
            '',
            '### How to Classify',
            '',
            f'Add a rule to {rules_hint or "a JSON rule file"} and pass it with `--rules`.',
            '',
            'Example:',
            '```json',
            '[',
            '  {',
            '    "name": "my-devices",',
            '    "category": "IoT - Smart Home",',
            '    "priority": 60,',
            '    "tier": "name",',
            '    "name_keywords": ["your-device-pattern"]',
            '  }',
            ']',
            '```',
            '',
        ]

    if result.rejected:
        lines += ['## Rejected Records', '']
        lines += [f'- #{r.index} {_cell(r.mac)}: {r.reason}' for r in result.rejected]
        lines.append('')

    return '\n'.join(lines)
