from __future__ import annotations

import html
import json

from postdesk.content.session import INITIAL_BODY, NOTICES, TOOLBAR_SNIPPETS

_PAGE = r"""<!doctype html>
<html lang="zh-TW">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <meta name="robots" content="noindex, nofollow" />
  <title>__SITE_NAME__ Writer</title>
  <style>
    :root { --ink:#1c1917; --muted:#78716c; --line:#e7e5e4; --teal:#0d9488; --good:#059669; --fair:#d97706; --poor:#dc2626; }
    * { box-sizing:border-box; }
    body { margin:0; color:var(--ink); font-family:"Noto Sans TC", system-ui, sans-serif; }
    .hidden { display:none !important; }
    .login { height:100vh; display:flex; align-items:center; justify-content:center; background:#f5f5f4; }
    .login-card { background:#fff; border-radius:16px; padding:32px; width:100%; max-width:360px; display:grid; gap:14px; box-shadow:0 10px 30px rgba(0,0,0,.08); }
    header { background:var(--ink); color:#fff; padding:8px 12px; display:flex; justify-content:space-between; align-items:center; }
    header button, .btn { border:none; border-radius:6px; padding:5px 10px; font-size:.8rem; cursor:pointer; background:#44403c; color:#fff; }
    .primary { background:var(--teal); color:#fff; font-weight:700; }
    .primary:disabled { opacity:.5; cursor:wait; }
    .notice { padding:6px 12px; font-size:.8rem; display:flex; justify-content:space-between; }
    .notice.ok { background:#ecfdf5; color:#065f46; } .notice.err { background:#fef2f2; color:#991b1b; }
    .split { display:grid; grid-template-columns:1fr 1fr; height:calc(100vh - 110px); }
    .pane { display:flex; flex-direction:column; overflow:hidden; border-right:1px solid var(--line); }
    .meta { padding:10px; display:grid; gap:6px; background:#fafaf9; border-bottom:1px solid var(--line); }
    input, textarea, select { border:1px solid var(--line); border-radius:6px; padding:6px 8px; font:inherit; font-size:.85rem; }
    #title { font-size:1rem; font-weight:700; }
    .row { display:flex; gap:6px; flex-wrap:wrap; }
    .row input { flex:1; min-width:90px; }
    .toolbar { display:flex; gap:2px; padding:4px 8px; border-bottom:1px solid var(--line); align-items:center; }
    .toolbar button { border:none; background:none; padding:3px 7px; border-radius:4px; cursor:pointer; color:var(--muted); }
    .toolbar button:hover { background:#f5f5f4; }
    #body { flex:1; border:none; padding:12px; font-family:ui-monospace, monospace; resize:none; outline:none; }
    .faq { padding:8px 10px; border-top:1px solid var(--line); background:#fafaf9; max-height:190px; overflow:auto; }
    .faq-item { display:flex; gap:6px; margin-top:6px; }
    .faq-item div { flex:1; display:grid; gap:4px; }
    .preview { overflow:auto; padding:20px; background:#fafaf9; }
    .preview article { max-width:680px; margin:0 auto; }
    .preview h2 { border-bottom:1px solid var(--line); padding-bottom:6px; }
    .preview li.bullet { list-style:disc; margin-left:18px; } .preview li.numbered { list-style:decimal; margin-left:18px; }
    .preview img { max-width:100%; border-radius:8px; }
    .preview code { background:#f5f5f4; padding:1px 5px; border-radius:4px; color:#e11d48; }
    .toc { background:#fff; border:1px solid var(--line); border-radius:8px; padding:12px; margin-bottom:18px; }
    .toc .h3 { margin-left:16px; }
    .faq-preview { background:#fffbeb; border:1px solid #fde68a; border-radius:8px; padding:14px; margin-top:24px; }
    .cover { width:100%; height:180px; object-fit:cover; border-radius:12px; }
    .seo-bar { display:flex; gap:16px; padding:6px 12px; border-top:1px solid var(--line); font-size:.78rem; align-items:center; }
    .seo-bar .serp { flex:1; } .serp-title { color:#1d4ed8; } .serp-url { color:#15803d; }
    .checks span { margin-right:8px; }
    .score.good { color:var(--good); } .score.fair { color:var(--fair); } .score.poor { color:var(--poor); }
    .modal { position:fixed; inset:0; background:rgba(0,0,0,.5); display:flex; align-items:center; justify-content:center; padding:16px; }
    .modal-card { background:#fff; border-radius:14px; width:100%; max-width:860px; max-height:80vh; overflow:auto; padding:12px; }
    pre { background:#1c1917; color:#f5f5f4; border-radius:10px; padding:12px; white-space:pre-wrap; font-size:.75rem; }
  </style>
</head>
<body>
  <div id="login" class="login">
    <div class="login-card">
      <strong>✦ __SITE_NAME__ Writer</strong>
      <input id="writerKey" type="password" placeholder="輸入通行密碼" />
      <button id="enterBtn" class="btn primary" type="button">進入後台</button>
    </div>
  </div>

  <div id="app" class="hidden">
    <header>
      <div><strong>✦ __SITE_NAME__ Writer</strong> <button id="newBtn" type="button">📄 新文章</button></div>
      <div>
        <span id="wordCountTop"></span>
        <button id="copyBtn" type="button">📋</button>
        <button id="outputBtn" type="button">&lt;/&gt;</button>
        <button id="publishBtn" class="primary" type="button">🚀 發佈到網站</button>
      </div>
    </header>
    <div id="notice" class="notice hidden"><span id="noticeText"></span><span><a id="noticeLink" target="_blank" rel="noopener" class="hidden">查看文章 ↗</a> <button id="dismissBtn" class="btn" type="button">✕</button></span></div>

    <div class="split">
      <section class="pane">
        <div class="meta">
          <input id="title" type="text" placeholder="文章標題" />
          <textarea id="description" rows="2" placeholder="SEO 描述（50-160 字）"></textarea>
          <div class="row">
            <select id="category"></select>
            <button id="catToggle" class="btn" type="button">⚙️</button>
            <input id="tags" type="text" placeholder="標籤（逗號分隔）" />
            <input id="coverImage" type="text" placeholder="封面圖 URL" />
          </div>
          <div id="catManager" class="hidden">
            <div id="catList" class="row"></div>
            <div class="row"><input id="newCat" type="text" placeholder="新分類" /><button id="addCatBtn" class="btn primary" type="button">+</button></div>
          </div>
        </div>
        <div class="toolbar" id="toolbar">
          <button data-action="h2" type="button">H2</button>
          <button data-action="h3" type="button">H3</button>
          <button data-action="bold" type="button"><b>B</b></button>
          <button data-action="italic" type="button"><i>I</i></button>
          <button data-action="link" type="button">🔗</button>
          <button data-action="image" type="button">🖼️</button>
          <button data-action="bullet" type="button">•</button>
          <button data-action="code" type="button">&lt;/&gt;</button>
          <span style="flex:1"></span><span id="wordCount"></span>
        </div>
        <textarea id="body" spellcheck="false" placeholder="開始寫作..."></textarea>
        <div class="faq">
          <div class="row" style="justify-content:space-between"><strong>❓ FAQ Schema</strong><button id="addFaqBtn" class="btn primary" type="button">+</button></div>
          <div id="faqList"></div>
        </div>
      </section>
      <section class="preview">
        <article>
          <img id="coverPreview" class="cover hidden" alt="" />
          <p><span id="categoryPreview"></span> · <span id="datePreview"></span> · <span id="wordsPreview"></span></p>
          <h1 id="titlePreview"></h1>
          <p id="descriptionPreview"></p>
          <div id="toc" class="toc hidden"></div>
          <div id="rendered"></div>
          <div id="faqPreview" class="faq-preview hidden"></div>
        </article>
      </section>
    </div>

    <div class="seo-bar">
      <div class="serp"><div id="serpTitle" class="serp-title"></div><div id="serpUrl" class="serp-url"></div></div>
      <div><strong id="seoScore" class="score"></strong> <span id="seoChecks" class="checks"></span></div>
    </div>

    <div id="outputModal" class="modal hidden">
      <div class="modal-card">
        <div class="row" style="justify-content:space-between"><strong>📄 Markdown + Schema</strong><button id="closeOutput" class="btn" type="button">✕</button></div>
        <pre id="markdownOut"></pre>
        <strong>Schema JSON-LD</strong>
        <pre id="schemaOut"></pre>
      </div>
    </div>
  </div>

  <script>
    const INITIAL_BODY = __INITIAL_BODY__;
    const TOOLBAR = __TOOLBAR__;
    const NOTICES = __NOTICES__;
    const state = { writerKey: "", slug: null, faqs: [{ question: "", answer: "" }], publishing: false, last: null, timer: null };
    const byId = (id) => document.getElementById(id);
    const text = (value) => { const d = document.createElement("div"); d.textContent = value; return d.innerHTML; };

    function draft() {
      return {
        title: byId("title").value,
        description: byId("description").value,
        body: byId("body").value,
        category: byId("category").value,
        tags: byId("tags").value,
        cover_image: byId("coverImage").value,
        faqs: state.faqs,
        slug: state.slug,
      };
    }

    async function api(path, options = {}) {
      const headers = Object.assign({ "Content-Type": "application/json", "x-writer-key": state.writerKey }, options.headers || {});
      const response = await fetch(path, Object.assign({}, options, { headers }));
      const data = await response.json();
      if (!response.ok) throw new Error(data.error || data.detail || "Request failed");
      return data;
    }

    async function refreshPreview() {
      const d = draft();
      const data = await api("/api/preview", { method: "POST", body: JSON.stringify(d) });
      if (d.title && !state.slug) state.slug = data.slug;
      state.last = data;
      byId("titlePreview").textContent = d.title || "文章標題";
      byId("descriptionPreview").textContent = d.description || "文章描述...";
      byId("categoryPreview").textContent = d.category;
      byId("datePreview").textContent = new Date().toLocaleDateString("zh-TW");
      byId("wordsPreview").textContent = `${data.word_count} 字`;
      byId("wordCount").textContent = `${data.word_count}字`;
      byId("wordCountTop").textContent = `${data.word_count} 字`;
      byId("rendered").innerHTML = data.html;
      const cover = byId("coverPreview");
      cover.classList.toggle("hidden", !d.cover_image);
      if (d.cover_image) cover.src = d.cover_image;
      const toc = byId("toc");
      toc.classList.toggle("hidden", !data.headings.length);
      toc.innerHTML = "<strong>📋 目錄</strong>" + data.headings.map((h) => `<div class="h${h.level}">${text(h.text)}</div>`).join("");
      const valid = state.faqs.filter((f) => f.question.trim() && f.answer.trim());
      const faqBox = byId("faqPreview");
      faqBox.classList.toggle("hidden", !valid.length);
      faqBox.innerHTML = "<h2>❓ 常見問題</h2>" + valid.map((f) => `<p><strong>Q: ${text(f.question)}</strong><br />A: ${text(f.answer)}</p>`).join("");
      byId("serpTitle").textContent = data.search_title;
      byId("serpUrl").textContent = data.search_url;
      const score = byId("seoScore");
      score.className = `score ${data.seo.grade}`;
      score.textContent = `SEO ${data.seo.score}/${data.seo.max_score}`;
      byId("seoChecks").innerHTML = data.seo.checks.map((c) => `<span>${c.passed ? "✅" : "⚠️"} ${text(c.label)} ${text(c.detail)}</span>`).join("");
      byId("markdownOut").textContent = data.markdown;
      byId("schemaOut").textContent = JSON.stringify(data.structured_data, null, 2);
    }

    function schedulePreview() {
      clearTimeout(state.timer);
      state.timer = setTimeout(() => refreshPreview().catch((err) => showNotice(false, err.message)), 150);
    }

    function showNotice(ok, message, url) {
      const notice = byId("notice");
      notice.className = `notice ${ok ? "ok" : "err"}`;
      byId("noticeText").textContent = message;
      const link = byId("noticeLink");
      link.classList.toggle("hidden", !url);
      if (url) link.href = url;
    }

    function renderFaqs() {
      const list = byId("faqList");
      list.innerHTML = "";
      state.faqs.forEach((faq, index) => {
        const row = document.createElement("div");
        row.className = "faq-item";
        const fields = document.createElement("div");
        ["question", "answer"].forEach((field) => {
          const input = document.createElement("input");
          input.placeholder = field === "question" ? "問題" : "答案";
          input.value = faq[field];
          input.addEventListener("input", () => { state.faqs[index][field] = input.value; schedulePreview(); });
          fields.appendChild(input);
        });
        row.appendChild(fields);
        if (state.faqs.length > 1) {
          const remove = document.createElement("button");
          remove.className = "btn";
          remove.type = "button";
          remove.textContent = "🗑️";
          remove.addEventListener("click", () => { state.faqs.splice(index, 1); renderFaqs(); schedulePreview(); });
          row.appendChild(remove);
        }
        list.appendChild(row);
      });
    }

    function renderCategories(categories) {
      const select = byId("category");
      const current = select.value;
      select.innerHTML = categories.map((c) => `<option>${text(c)}</option>`).join("");
      select.value = categories.includes(current) ? current : categories[0];
      const list = byId("catList");
      list.innerHTML = "";
      categories.forEach((name) => {
        const chip = document.createElement("button");
        chip.className = "btn";
        chip.type = "button";
        chip.textContent = `${name} ×`;
        chip.addEventListener("click", async () => {
          try {
            const data = await api(`/api/categories/${encodeURIComponent(name)}`, { method: "DELETE" });
            renderCategories(data.categories);
            schedulePreview();
          } catch (err) { showNotice(false, NOTICES.failed + err.message); }
        });
        list.appendChild(chip);
      });
    }

    function insertAtCursor(snippet) {
      const ta = byId("body");
      const start = ta.selectionStart, end = ta.selectionEnd;
      ta.value = ta.value.substring(0, start) + snippet + ta.value.substring(end);
      ta.selectionStart = ta.selectionEnd = start + snippet.length;
      ta.focus();
      schedulePreview();
    }

    async function publish() {
      const d = draft();
      if (!d.title.trim()) { alert(NOTICES.missing_title); return; }
      if (state.publishing) return;
      state.publishing = true;
      const button = byId("publishBtn");
      button.disabled = true;
      button.textContent = "⏳ " + NOTICES.publishing;
      byId("notice").classList.add("hidden");
      try {
        await refreshPreview();
        const data = await api("/api/publish", {
          method: "POST",
          body: JSON.stringify({ filename: `${state.slug}.md`, content: state.last.markdown, message: NOTICES.commit + d.title }),
        });
        showNotice(true, NOTICES.published, data.url);
      } catch (err) {
        showNotice(false, NOTICES.failed + err.message);
      } finally {
        state.publishing = false;
        button.disabled = false;
        button.textContent = "🚀 發佈到網站";
      }
    }

    function enter() {
      state.writerKey = byId("writerKey").value;
      if (!state.writerKey) return;
      byId("login").classList.add("hidden");
      byId("app").classList.remove("hidden");
      byId("body").value = INITIAL_BODY;
      renderFaqs();
      api("/api/categories").then((data) => { renderCategories(data.categories); return refreshPreview(); })
        .catch((err) => showNotice(false, err.message));
    }

    byId("enterBtn").addEventListener("click", enter);
    byId("writerKey").addEventListener("keydown", (e) => { if (e.key === "Enter") enter(); });
    ["title", "description", "body", "tags", "coverImage", "category"].forEach((id) => byId(id).addEventListener("input", schedulePreview));
    byId("toolbar").addEventListener("click", (e) => {
      const action = e.target.closest("button") && e.target.closest("button").dataset.action;
      if (action) insertAtCursor(TOOLBAR[action]);
    });
    byId("addFaqBtn").addEventListener("click", () => { state.faqs.push({ question: "", answer: "" }); renderFaqs(); });
    byId("catToggle").addEventListener("click", () => byId("catManager").classList.toggle("hidden"));
    byId("addCatBtn").addEventListener("click", async () => {
      const name = byId("newCat").value.trim();
      if (!name) return;
      try {
        const data = await api("/api/categories", { method: "POST", body: JSON.stringify({ name }) });
        byId("newCat").value = "";
        renderCategories(data.categories);
      } catch (err) { showNotice(false, NOTICES.failed + err.message); }
    });
    byId("publishBtn").addEventListener("click", publish);
    byId("dismissBtn").addEventListener("click", () => byId("notice").classList.add("hidden"));
    byId("outputBtn").addEventListener("click", () => byId("outputModal").classList.remove("hidden"));
    byId("closeOutput").addEventListener("click", () => byId("outputModal").classList.add("hidden"));
    byId("copyBtn").addEventListener("click", async () => {
      if (!state.last) return;
      await navigator.clipboard.writeText(state.last.markdown);
      byId("copyBtn").textContent = "✅";
      setTimeout(() => { byId("copyBtn").textContent = "📋"; }, 2000);
    });
    byId("newBtn").addEventListener("click", () => {
      if (byId("title").value && !confirm("確定要清除目前內容？")) return;
      ["title", "description", "tags", "coverImage"].forEach((id) => { byId(id).value = ""; });
      byId("body").value = INITIAL_BODY;
      state.slug = null;
      state.faqs = [{ question: "", answer: "" }];
      byId("notice").classList.add("hidden");
      renderFaqs();
      schedulePreview();
    });
  </script>
</body>
</html>
"""


def render_editor_page(*, site_name: str) -> str:
    return (
        _PAGE.replace("__SITE_NAME__", html.escape(site_name))
        .replace("__INITIAL_BODY__", json.dumps(INITIAL_BODY, ensure_ascii=False))
        .replace("__TOOLBAR__", json.dumps(TOOLBAR_SNIPPETS, ensure_ascii=False))
        .replace("__NOTICES__", json.dumps(NOTICES, ensure_ascii=False))
    )
