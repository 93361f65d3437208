from __future__ import annotations

import io

import pandas as pd
from fastapi.responses import StreamingResponse


# PUBLIC_INTERFACE
def csv_response(text: str, filename: str) -> StreamingResponse:
    """Stream CSV text as a file download."""
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(io.StringIO(text), media_type="text/csv", headers=headers)


# PUBLIC_INTERFACE
def dataframe_csv_response(df: pd.DataFrame, filename: str) -> StreamingResponse:
    """Convert a DataFrame to CSV (header row, no index) and stream it as a download."""
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    buffer.seek(0)
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(buffer, media_type="text/csv", headers=headers)
