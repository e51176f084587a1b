# gapsync/sheets/client.py

import os
from dataclasses import dataclass
from typing import Optional

import gspread
from dotenv import load_dotenv
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .schema import TRACKER_SHEET_NAME_DEFAULT
from .table import MemoryTable, WorksheetTable


@dataclass(frozen=True)
class SheetsConfig:
    spreadsheet_id: str
    tracker_sheet_name: str = TRACKER_SHEET_NAME_DEFAULT
    credentials_path: str = ""
    timezone: str = ""


def load_sheets_config() -> SheetsConfig:
    load_dotenv()

    spreadsheet_id = os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID", "").strip()
    tracker_name = os.getenv("GOOGLE_SHEETS_WORKSHEET_NAME", TRACKER_SHEET_NAME_DEFAULT).strip()
    cred_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "").strip()
    tz = os.getenv("GAPSYNC_TIMEZONE", "").strip()

    if not spreadsheet_id:
        raise RuntimeError("Missing env var: GOOGLE_SHEETS_SPREADSHEET_ID")
    if not cred_path:
        raise RuntimeError("Missing env var: GOOGLE_APPLICATION_CREDENTIALS")

    return SheetsConfig(
        spreadsheet_id=spreadsheet_id,
        tracker_sheet_name=tracker_name or TRACKER_SHEET_NAME_DEFAULT,
        credentials_path=cred_path,
        timezone=tz,
    )


SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def token_path_for(credentials_path: str) -> str:
    return os.path.join(os.path.dirname(credentials_path), "gapsync_token.json")


def _load_cached_token(token_path: str) -> Optional[Credentials]:
    if not os.path.exists(token_path):
        return None
    return Credentials.from_authorized_user_file(token_path, SHEETS_SCOPES)


def _authorize(credentials_path: str) -> Credentials:
    """OAuth desktop-app credentials, cached as JSON next to the client secrets."""
    token_path = token_path_for(credentials_path)
    creds = _load_cached_token(token_path)
    if creds is not None and creds.valid:
        return creds

    if creds is not None and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    else:
        flow = InstalledAppFlow.from_client_secrets_file(credentials_path, SHEETS_SCOPES)
        creds = flow.run_local_server(port=0)

    with open(token_path, "w", encoding="utf-8") as f:
        f.write(creds.to_json())
    return creds


def open_worksheet(cfg: SheetsConfig) -> gspread.Worksheet:
    gc = gspread.authorize(_authorize(cfg.credentials_path))
    sh = gc.open_by_key(cfg.spreadsheet_id)
    return sh.worksheet(cfg.tracker_sheet_name)


def open_table(cfg: SheetsConfig, dry_run: bool = False):
    """
    Returns the tracker table. With dry_run the sheet is read once into a
    MemoryTable and nothing is written back.
    """
    ws = open_worksheet(cfg)
    if dry_run:
        return MemoryTable.from_worksheet(ws)
    return WorksheetTable(ws)
