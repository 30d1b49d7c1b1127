"""
Map Visualization Module for India Disaster Response

Builds the live report map with Folium: one marker per active report that
carries coordinates, coloured by severity.
"""

import html
import logging
from typing import List, Optional, Tuple

import folium
from folium.plugins import MarkerCluster

from disaster_response.core.constants import INDIA_CENTER, SEVERITY_COLORS
from disaster_response.crowdsource.report_handler import DisasterReport

logger = logging.getLogger(__name__)

DEFAULT_MARKER_COLOR = "#6b7280"


def get_severity_color(severity: str) -> str:
    """Get marker color for a severity level."""
    return SEVERITY_COLORS.get((severity or "").lower(), DEFAULT_MARKER_COLOR)


def get_severity_radius(severity: str) -> int:
    """Marker radius grows with severity."""
    radii = {"low": 6, "medium": 8, "high": 11, "critical": 14}
    return radii.get((severity or "").lower(), 6)


def _popup_html(report: DisasterReport) -> str:
    color = get_severity_color(report.severity)
    details = html.escape(report.description[:200]) if report.description else ""
    return f"""
    <div style="font-family: Arial; min-width: 200px;">
        <h4 style="margin: 0; color: {color};">{html.escape(report.type.title())}</h4>
        <hr style="margin: 5px 0;">
        <b>Severity:</b> {html.escape(report.severity.upper())}<br>
        <b>Location:</b> {html.escape(report.location_line() or "Unknown")}<br>
        <b>People Affected:</b> {html.escape(str(report.people_affected or "Unknown"))}<br>
        <b>Source:</b> {report.source.value.upper()}<br>
        <b>Reported:</b> {report.created_at.strftime("%Y-%m-%d %H:%M")} UTC<br>
        <b>Ref:</b> {html.escape(report.reference_id)}<br>
        {details}
    </div>
    """


def create_report_map(
    reports: List[DisasterReport],
    center: Optional[Tuple[float, float]] = None,
    zoom: int = 5,
    title: str = "India Disaster Response - Active Reports",
    cluster_markers: bool = True,
) -> folium.Map:
    """
    Create an interactive map of disaster reports.

    Reports without coordinates are left off the map.

    Args:
        reports: DisasterReport objects
        center: Map center (lat, lon). Defaults to the center of India.
        zoom: Initial zoom level (1-18)
        title: Map title
        cluster_markers: Cluster markers when zoomed out

    Returns:
        Folium Map object
    """
    mapped = [r for r in reports if r.has_coordinates]

    report_map = folium.Map(
        location=center or INDIA_CENTER,
        zoom_start=zoom,
        tiles="OpenStreetMap",
    )

    if cluster_markers:
        marker_group = MarkerCluster(name="Reports")
    else:
        marker_group = folium.FeatureGroup(name="Reports")

    for report in mapped:
        color = get_severity_color(report.severity)
        folium.CircleMarker(
            location=[report.latitude, report.longitude],
            radius=get_severity_radius(report.severity),
            popup=folium.Popup(_popup_html(report), max_width=300),
            tooltip=f"{report.type.title()} ({report.severity})",
            color=color,
            fill=True,
            fill_color=color,
            fill_opacity=0.7,
            weight=2,
        ).add_to(marker_group)

    marker_group.add_to(report_map)

    title_html = f'''
    <div style="position: fixed;
                top: 10px; left: 50px;
                background-color: rgba(255,255,255,0.9);
                padding: 10px 20px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;">
        <h3 style="margin: 0;">{html.escape(title)}</h3>
        <p style="margin: 5px 0 0 0; color: #555; font-size: 12px;">
            {len(mapped)} reports on map
        </p>
    </div>
    '''
    report_map.get_root().html.add_child(folium.Element(title_html))

    legend_rows = "".join(
        f'<span style="color: {color};">●</span> {level.title()}<br>'
        for level, color in SEVERITY_COLORS.items()
    )
    legend_html = f'''
    <div style="position: fixed;
                bottom: 30px; right: 30px;
                background-color: rgba(255,255,255,0.9);
                padding: 10px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;
                font-size: 12px;">
        <b>Severity</b><br>
        {legend_rows}
    </div>
    '''
    report_map.get_root().html.add_child(folium.Element(legend_html))

    logger.info(f"Created map with {len(mapped)} of {len(reports)} reports")
    return report_map
