"""
UploadTree - derived file versions for uploads
"""

__version__ = "0.1.0"
