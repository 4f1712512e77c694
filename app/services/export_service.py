import pandas as pd
from typing import List
from io import BytesIO


class ExportService:
    """Service for exporting analytics rows to spreadsheet formats."""

    @staticmethod
    def _frame(data: List[dict]) -> pd.DataFrame:
        df = pd.DataFrame(data)

        # Convert datetime columns to string
        for col in df.columns:
            if pd.api.types.is_datetime64_any_dtype(df[col]):
                df[col] = df[col].dt.strftime('%Y-%m-%d %H:%M:%S')
        return df

    @staticmethod
    def export_to_csv(data: List[dict]) -> BytesIO:
        """
        Export rows to CSV format.

        Args:
            data: List of dictionaries to export

        Returns:
            BytesIO object containing CSV data
        """
        buffer = BytesIO()
        ExportService._frame(data).to_csv(buffer, index=False, encoding='utf-8')
        buffer.seek(0)
        return buffer

    @staticmethod
    def export_to_excel(data: List[dict], sheet_name: str = 'Analytics') -> BytesIO:
        """
        Export rows to Excel format.

        Args:
            data: List of dictionaries to export
            sheet_name: Worksheet title

        Returns:
            BytesIO object containing Excel data
        """
        buffer = BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            ExportService._frame(data).to_excel(writer, index=False, sheet_name=sheet_name)

        buffer.seek(0)
        return buffer


# Singleton instance
export_service = ExportService()
