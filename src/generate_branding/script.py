"""
PowerShell script emitter for applying tenant branding through Microsoft Graph.
"""

from datetime import datetime, UTC

try:
    from .colors import Palette
except ImportError:
    from colors import Palette

SCRIPT_FILENAME = "ApplyBranding.ps1"
LOGO_FILENAME = "SquareLogo.png"
IMAGE_FILENAMES = (
    "BannerImageLight.png",
    "BannerImageDark.png",
    "BackgroundImageDesktopLight.png",
    "BackgroundImageDesktopDark.png",
    "BackgroundImageMobileLight.png",
    "BackgroundImageMobileDark.png",
)

SCRIPT_TEMPLATE = r"""# Microsoft 365 Branding Configuration Script
# Generated by M365 Branding Configurator
# Date: {timestamp}

# Connect to Microsoft Graph
Connect-MgGraph -Scopes "Organization.ReadWrite.All"

# Get the organization
$organization = Get-MgOrganization

# Update organization branding
$params = @{{
    BackgroundColor = "{background}"
    SignInPageText = "Welcome to our organization"
}}

Update-MgOrganizationBranding -OrganizationId $organization.Id -BodyParameter $params

# Upload banner image
$bannerLight = [Convert]::ToBase64String([System.IO.File]::ReadAllBytes(".\BannerImageLight.png"))
$bannerDark = [Convert]::ToBase64String([System.IO.File]::ReadAllBytes(".\BannerImageDark.png"))

# Upload background images
$backgroundDesktopLight = [Convert]::ToBase64String([System.IO.File]::ReadAllBytes(".\BackgroundImageDesktopLight.png"))
$backgroundDesktopDark = [Convert]::ToBase64String([System.IO.File]::ReadAllBytes(".\BackgroundImageDesktopDark.png"))
$backgroundMobileLight = [Convert]::ToBase64String([System.IO.File]::ReadAllBytes(".\BackgroundImageMobileLight.png"))
$backgroundMobileDark = [Convert]::ToBase64String([System.IO.File]::ReadAllBytes(".\BackgroundImageMobileDark.png"))

# Upload logo
$squareLogo = [Convert]::ToBase64String([System.IO.File]::ReadAllBytes(".\SquareLogo.png"))

# Apply custom CSS
$customCSS = @"
.ms-Button--primary {{
    background-color: {primary} !important;
    border-color: {primary} !important;
}}

.ms-Button--primary:hover {{
    background-color: {primary_dark} !important;
    border-color: {primary_dark} !important;
}}

.ms-Link {{
    color: {primary} !important;
}}

.ms-Link:hover {{
    color: {primary_dark} !important;
}}
"@

Write-Host "Branding configuration completed successfully!" -ForegroundColor Green
Write-Host "Primary Color: {primary}" -ForegroundColor Cyan
Write-Host "Secondary Color: {secondary}" -ForegroundColor Cyan

# Disconnect from Microsoft Graph
Disconnect-MgGraph
"""


def emit_script(palette: Palette, timestamp: datetime) -> str:
    """Fill the branding script template with palette values."""
    return SCRIPT_TEMPLATE.format(
        timestamp=format_timestamp(timestamp),
        background=palette.background,
        primary=palette.primary,
        primary_dark=palette.primary_dark,
        secondary=palette.secondary,
    )


def format_timestamp(timestamp: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    utc = timestamp.astimezone(UTC)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")
