# Fixed C runtime emitted at the top of every generated translation unit.

HEADERS = """\
#define _XOPEN_SOURCE 700
#include <stdio.h>
#include <stdlib.h>
#include <string.h>
#include <sys/time.h>
#include <sys/stat.h>
#include <unistd.h>

// forward declaration for usleep on some libc variants
int usleep(unsigned int);

#if defined(__GNUC__) || defined(__clang__)
#define VTS_UNUSED __attribute__((unused))
#else
#define VTS_UNUSED
#endif
"""

HELPERS = """\
// --- standard runtime ---
static VTS_UNUSED void vts_log_info(const char *msg) { printf("[info] %s\\n", msg); }
static VTS_UNUSED void vts_log_warn(const char *msg) { printf("[warn] %s\\n", msg); }
static VTS_UNUSED void vts_log_error(const char *msg) { printf("[error] %s\\n", msg); }
static VTS_UNUSED void vts_sleep_ms(unsigned long ms) { usleep(ms * 1000); }
static VTS_UNUSED long long vts_time_now_ms(void) {
    struct timeval tv;
    gettimeofday(&tv, NULL);
    return (long long)tv.tv_sec * 1000 + tv.tv_usec / 1000;
}

// Whole-file read; returns a heap buffer the caller frees, or NULL on failure.
static VTS_UNUSED char *vts_fs_read_file(const char *path) {
    FILE *f = fopen(path, "rb");
    if (!f) return NULL;
    if (fseek(f, 0, SEEK_END) != 0) { fclose(f); return NULL; }
    long size = ftell(f);
    if (size < 0) { fclose(f); return NULL; }
    if (fseek(f, 0, SEEK_SET) != 0) { fclose(f); return NULL; }
    char *buf = (char *)malloc((size_t)size + 1);
    if (!buf) { fclose(f); return NULL; }
    size_t read = fread(buf, 1, (size_t)size, f);
    buf[read] = 0;
    fclose(f);
    return buf;
}

// Whole-file write, creating the parent directory; 0 on success, -1 on failure.
static VTS_UNUSED int vts_fs_write_file(const char *path, const char *contents) {
    const char *slash = strrchr(path, '/');
    if (slash) {
        size_t len = (size_t)(slash - path);
        if (len > 0) {
            char *dir = (char *)malloc(len + 1);
            if (!dir) return -1;
            memcpy(dir, path, len);
            dir[len] = 0;
            struct stat st;
            if (stat(dir, &st) != 0) { mkdir(dir, 0755); }
            free(dir);
        }
    }
    FILE *f = fopen(path, "wb");
    if (!f) return -1;
    size_t len = strlen(contents);
    size_t written = fwrite(contents, 1, len, f);
    fclose(f);
    return written == len ? 0 : -1;
}
"""

PREAMBLE = HEADERS + "\n" + HELPERS


def c_string(text: str) -> str:
    # Only embedded double quotes are escaped.
    return '"' + text.replace('"', '\\"') + '"'
