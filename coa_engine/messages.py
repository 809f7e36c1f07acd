"""User-facing notification texts.

The application is shipped in Indonesian; server messages are shown as-is
and these are the fallbacks when the server sends none.
"""

LOAD_FAILED = "Gagal memuat data akun"
SAVE_FAILED = "Gagal menyimpan akun"
DELETE_FAILED = "Gagal menghapus akun"
EXPORT_FAILED = "Gagal mengexport data"
IMPORT_FAILED = "Gagal mengimport data"
LEDGER_FAILED = "Gagal memuat buku besar"
NETWORK_FAILED = "Tidak dapat terhubung ke server"

CREATED = "Akun berhasil dibuat"
UPDATED = "Akun berhasil diperbarui"
DELETED = "Akun berhasil dihapus"
EXPORTED = "Export berhasil"
IMPORTED = "Import berhasil"

EXPORTING = "Mengekspor data akun..."
IMPORTING = "Mengimport data akun..."

CONFIRM_DELETE = "Apakah Anda yakin ingin menghapus akun ini?"

EMPTY_NO_ACCOUNTS = "Belum ada akun"
EMPTY_NO_ACCOUNTS_HINT = "Silakan tambah akun untuk memulai pembukuan."
EMPTY_NO_MATCH = "Tidak ada akun yang sesuai"
EMPTY_NO_MATCH_HINT = "Coba ubah kata kunci pencarian atau filter Anda."

SUB_ACCOUNT_NEEDS_HEADER = "Sub-akun hanya dapat dibuat di bawah akun header"
PARENT_IS_SELF = "Akun tidak dapat menjadi induk dirinya sendiri"
PARENT_IS_DESCENDANT = "Akun tidak dapat dipindahkan ke bawah sub-akunnya sendiri"
PARENT_NOT_HEADER = "Induk akun harus berupa akun header"
LEAF_HAS_CHILDREN = "Akun yang memiliki sub-akun harus tetap menjadi akun header"
