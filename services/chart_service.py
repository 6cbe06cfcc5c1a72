"""
Chart service for the PTM Report Card Portal
Trend and subject charts rendered with matplotlib
"""

import base64
from io import BytesIO

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# Same palette as the web report card
BAR_COLORS = ['#10b981', '#14b8a6', '#059669', '#0d9488', '#f59e0b', '#84cc16', '#ef4444', '#6366f1']


class ChartService:
    """Service for rendering report card charts as PNG images"""

    @staticmethod
    def _band_color(percentage):
        if percentage >= 90:
            return '#10b981'
        elif percentage >= 75:
            return '#6366f1'
        elif percentage >= 50:
            return '#f59e0b'
        return '#ef4444'

    @staticmethod
    def _figure_to_png(fig):
        img_data = BytesIO()
        fig.savefig(img_data, format='png', dpi=150, bbox_inches='tight')
        plt.close(fig)
        return img_data.getvalue()

    @staticmethod
    def trend_bar_chart(points, title=None, color='#6366f1'):
        """Bar chart of history points (x = test name, y = percentage).

        Returns PNG bytes, or None when there is nothing to plot.
        """
        if not points:
            return None
        try:
            labels = [point.label for point in points]
            values = [point.percentage for point in points]

            fig, ax = plt.subplots(figsize=(8, 3.6))
            x_pos = range(len(values))
            bars = ax.bar(x_pos, values, width=0.6, edgecolor=color, alpha=0.9)
            for index, bar in enumerate(bars):
                bar.set_color(BAR_COLORS[index % len(BAR_COLORS)])

            # Value labels on top of each bar
            for bar, value in zip(bars, values):
                ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height() + 1,
                        f'{value}%', ha='center', va='bottom', fontsize=7, fontweight='bold', color='#64748b')

            ax.set_xticks(list(x_pos))
            ax.set_xticklabels(labels, rotation=30, ha='right', fontsize=7)
            ax.set_ylim(0, 105)
            ax.set_ylabel('Percentage', fontsize=8)
            ax.grid(True, alpha=0.3, linestyle='--', axis='y')
            ax.spines['top'].set_visible(False)
            ax.spines['right'].set_visible(False)
            if title:
                ax.set_title(title, fontsize=10, fontweight='bold')
            fig.tight_layout()
            return ChartService._figure_to_png(fig)
        except Exception as e:
            print(f"Error generating trend chart: {e}")
            plt.close('all')
            return None

    @staticmethod
    def subject_performance_chart(category, subjects):
        """Horizontal bars of subject averages for one category"""
        if not subjects:
            return None
        try:
            names = [entry['subject'] for entry in subjects]
            values = [entry['percentage'] for entry in subjects]

            fig, ax = plt.subplots(figsize=(4, 0.45 * len(names) + 0.9))
            bars = ax.barh(names, values, color=[ChartService._band_color(v) for v in values], height=0.55)
            for bar, value in zip(bars, values):
                ax.text(min(value, 100) + 1, bar.get_y() + bar.get_height() / 2.,
                        f'{value}%', va='center', fontsize=7, fontweight='bold')
            ax.set_xlim(0, 115)
            ax.invert_yaxis()
            ax.tick_params(axis='both', labelsize=7)
            ax.set_title(f'{category} Average', fontsize=9, fontweight='bold')
            ax.spines['top'].set_visible(False)
            ax.spines['right'].set_visible(False)
            fig.tight_layout()
            return ChartService._figure_to_png(fig)
        except Exception as e:
            print(f"Error generating subject chart: {e}")
            plt.close('all')
            return None

    @staticmethod
    def report_charts(report):
        """All charts of a report keyed by name; empty series are left out"""
        charts = {}
        st_ot = ChartService.trend_bar_chart(report.st_ot, title='ST / OT Trend', color='#6366f1')
        if st_ot:
            charts['st_ot'] = st_ot
        major = ChartService.trend_bar_chart(report.major, title='Major Exams Trend (HY / Re-HY / Annual)',
                                             color='#10b981')
        if major:
            charts['major'] = major
        for category, subjects in report.ordered_subject_performance():
            png = ChartService.subject_performance_chart(category, subjects)
            if png:
                charts[f'subjects:{category}'] = png
        return charts

    @staticmethod
    def to_data_uri(png_bytes):
        """PNG bytes -> data URI for <img> tags"""
        if not png_bytes:
            return None
        return 'data:image/png;base64,' + base64.b64encode(png_bytes).decode('ascii')
