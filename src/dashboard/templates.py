"""
Dashboard Templates

HTML for the statistics page.
"""

from html import escape

from ..disbursement.stats import RunStatistics


class DashboardTemplates:
    """
    Template strings for the dashboard page.
    """

    @staticmethod
    def dashboard_template() -> str:
        """
        Template for the main statistics page.

        Returns:
            Page template with str.format placeholders (literal braces doubled)
        """
        return """<!DOCTYPE html>
<html>
<head>
    <title>{program} Cash Cannon</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; }}
        .stats {{ background: #f5f5f5; padding: 20px; margin: 20px 0; }}
        .button {{ background: #007cba; color: white; padding: 15px 30px; border: none; cursor: pointer; font-size: 16px; margin: 10px 0; }}
        .button:hover {{ background: #005a8b; }}
        .success {{ color: green; }}
        .error {{ color: red; }}
        pre {{ background: #fafafa; padding: 10px; }}
    </style>
</head>
<body>
    <h1>{program} Cash Cannon</h1>
    <div class="stats">
        <h3>Statistics</h3>
        <p>Mode: <strong>{mode}</strong>{running}</p>
        <p>Total Events: <strong>{total_events}</strong></p>
        <p>Events with Amount: <strong>{events_with_amount}</strong></p>
        <p>Total Amount Owed: <strong>${total_amount:.2f}</strong></p>
        <p>Planned Amount: <strong>${planned_amount:.2f}</strong></p>
        <p>Disbursements Created: <strong>{disbursements_created}</strong></p>
        <p>Processed: <strong>{processed_count}</strong></p>
        <p>Failed: <strong>{failed_count}</strong></p>
        <p>Last Run: <strong>{last_run}</strong></p>
    </div>

    <h3>Standard disbursements</h3>
    <button class="button" onclick="preview('')">Preview</button>
    <button class="button" onclick="trigger('/trigger-disbursements', null)">Trigger Disbursements</button>

    <h3>Custom disbursements</h3>
    <input type="number" id="custom_amount" min="0.01" step="0.01" placeholder="Amount in dollars">
    <button class="button" onclick="preview(document.getElementById('custom_amount').value)">Preview</button>
    <button class="button" onclick="triggerCustom()">Trigger Custom Disbursements</button>

    <pre id="output"></pre>

    <script>
        function show(data, ok) {{
            var out = document.getElementById('output');
            out.className = ok ? 'success' : 'error';
            out.textContent = JSON.stringify(data, null, 2);
        }}
        function preview(amount) {{
            var url = '/api/preview';
            if (amount) {{ url += '?custom_amount=' + encodeURIComponent(amount); }}
            fetch(url).then(function (r) {{
                return r.json().then(function (d) {{ show(d, r.ok); }});
            }});
        }}
        function trigger(url, body) {{
            if (!confirm('This moves real money. Continue?')) {{ return; }}
            fetch(url, {{ method: 'POST', body: body }}).then(function (r) {{
                return r.json().then(function (d) {{ show(d, r.ok); }});
            }});
        }}
        function triggerCustom() {{
            var body = new FormData();
            body.append('custom_amount', document.getElementById('custom_amount').value);
            trigger('/trigger-custom-disbursements', body);
        }}
    </script>
</body>
</html>"""

    @staticmethod
    def render_dashboard(stats: RunStatistics, program: str = "Campfire") -> str:
        """
        Fill the dashboard template from run statistics.

        Args:
            stats: Snapshot of the latest run statistics
            program: Program name shown in the title

        Returns:
            Rendered HTML page
        """
        last_run = "Never"
        if stats.last_run is not None:
            last_run = stats.last_run.strftime("%Y-%m-%d %H:%M:%S %Z")

        return DashboardTemplates.dashboard_template().format(
            program=escape(program),
            mode=escape(stats.mode),
            running=" (run in progress)" if stats.in_progress else "",
            total_events=stats.total_events,
            events_with_amount=stats.events_with_amount,
            total_amount=stats.total_amount,
            planned_amount=stats.planned_amount,
            disbursements_created=stats.disbursements_created,
            processed_count=stats.processed_count,
            failed_count=stats.failed_count,
            last_run=last_run
        )
